from postfolio.cli import app

app()
