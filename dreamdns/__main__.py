from dreamdns.cli import app

app(prog_name="dreamdns")
