from apodcache.cli.util.runner import run

__all__ = ["run"]
