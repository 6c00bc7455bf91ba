from app.neic.modules.submissions.service import is_honeypot_tripped, validate_submission_payload
from app.neic.modules.submissions.spam import FLAG_THRESHOLD, assess_spam


def test_ordinary_testimony_scores_zero():
    result = assess_spam("আমাদের এলাকায় ভোটের আগের রাতে ব্যালট বাক্স ভরা হয়েছিল।")
    assert result.score == 0
    assert result.reasons == []
    assert not result.flagged


def test_short_message_reason():
    assert "too_short" in assess_spam("hi").reasons


def test_urls_and_repetition_flag():
    result = assess_spam("see http://a and http://b aaaaaaaa")
    assert "contains_url" in result.reasons
    assert "repetition" in result.reasons
    assert result.score >= FLAG_THRESHOLD
    assert result.flagged


def test_shouting_is_counted():
    result = assess_spam("THE POLLING STATION WAS CAPTURED BY MEN")
    assert "uppercase_shouting" in result.reasons
    assert not result.flagged


def test_bengali_text_is_not_symbol_noise():
    assert "symbol_noise" not in assess_spam("নির্বাচন কমিশন তদন্ত করুক").reasons


def test_score_is_capped():
    message = "!!!!!!!! http://x http://y http://z http://w ?!?!?!"
    assert assess_spam(message).score <= 1.0


def test_honeypot_fields():
    assert is_honeypot_tripped({"website": "x"})
    assert is_honeypot_tripped({"hp_field": " y "})
    assert not is_honeypot_tripped({"website": "   "})
    assert not is_honeypot_tripped({})


def test_phone_formats():
    for phone in ("01712345678", "+8801712345678", "8801912345678"):
        data, issues = validate_submission_payload({"phone": phone, "message": "A long enough message"})
        assert issues == [], phone
        assert data.phone == phone
    _, issues = validate_submission_payload({"phone": "01212345678", "message": "A long enough message"})
    assert issues[0]["path"] == ["phone"]


def test_name_character_rules():
    _, issues = validate_submission_payload({"name": "Robert'); DROP", "phone": "01712345678", "message": "x" * 20})
    assert [i["path"] for i in issues] == [["name"]]
    data, issues = validate_submission_payload({"name": "মোঃ করিম", "phone": "01712345678", "message": "x" * 20})
    assert issues == []
    assert data.share_name is False
