"""Allow running as ``python -m github_issue_pdf``."""

from .cli.main import main

if __name__ == "__main__":
    main()
