"""Entry point for the café register Textual app."""

from __future__ import annotations

from caisse.register_app import RegisterApp


def main() -> None:
    """Run the Textual application."""
    RegisterApp().run()


if __name__ == "__main__":
    main()
