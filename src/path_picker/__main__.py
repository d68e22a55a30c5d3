from path_picker.cli import app

app()
