# main.py
import sys
import traceback

from .views.cli_view import run


def main() -> None:
    try:
        code = run(sys.argv[1:])
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        # Print the full traceback, then re-raise so CI sees the failure
        tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        print(tb, file=sys.stderr)
        print("Fatal Error:", e, file=sys.stderr)
        raise
    sys.exit(code)


if __name__ == "__main__":
    main()
