"""Launcher for the Courtside web app: ``streamlit run app.py``."""

from courtside_web.app import main

if __name__ == "__main__":
    main()
