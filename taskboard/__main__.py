from taskboard.main import run

run()
