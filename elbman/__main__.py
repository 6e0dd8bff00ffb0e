from elbman.cli import app

app(prog_name="elbman")
