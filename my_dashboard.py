"""Entry script for ``streamlit run my_dashboard.py``.

Streamlit executes its target as a plain script, so the package-relative
imports of :mod:`pomodorotracker.streamlit_app` only resolve through an
installed package (``pip install -e .``).
"""
from pomodorotracker.streamlit_app import main

main()
