from essaywords.cli.main import app

if __name__ == "__main__":  # pragma: no cover - CLI glue
    app()
