#!/usr/bin/env python3
"""
Computer Poet web entry point.

Launches the Gradio UI on port 7860. Set COMPUTER_POET_SHARE=1 for a public
share link and COMPUTER_POET_DB to choose the poem archive.
"""

from computer_poet.app.app import main

if __name__ == "__main__":
    main()
