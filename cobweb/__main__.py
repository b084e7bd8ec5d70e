import sys

from .app import CobwebApp
from .errors import ConfigError


def main():
    try:
        app = CobwebApp()
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 2
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
