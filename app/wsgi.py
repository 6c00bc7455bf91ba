from app.neic import create_app

app = create_app()
