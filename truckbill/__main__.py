"""Entry point for running the CLI: python -m truckbill"""

from truckbill.cli import cli

if __name__ == "__main__":
    cli()
