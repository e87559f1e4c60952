"""Package entry point for ``python -m ktm_transcriber``.

Opens the Tkinter window; there are no command-line options.
"""

from ktm_transcriber.gui import main

if __name__ == "__main__":
    main()
