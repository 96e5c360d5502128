from sheet_builder import cli

if __name__ == "__main__":
    cli.app()
