# cli/__init__.py
# ============================================================
# Command line front end for pagezip (see cli/main.py).
# ============================================================
