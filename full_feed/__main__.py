from .cli import app

app(prog_name="full-feed")
