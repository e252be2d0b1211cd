from recipe_steps.src.cli.main import cli

if __name__ == "__main__":
    cli()
