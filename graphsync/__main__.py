"""
CLI entry point, when used as a module: `python -m graphsync`.

Useful for debugging in the IDEs (use the start-mode "Module", module "graphsync").
"""
from graphsync import cli

if __name__ == '__main__':
    cli.main()
