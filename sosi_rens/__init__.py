# ==============================================
# SOSI-Rens
# ==============================================
#
# Package Structure (5 core components + orchestrator):
#
# sosi_rens/
# ├── encoding/     # Component 1: charset detection + decode/encode
# ├── parsing/      # Component 2: line classifier and category table
# ├── analysis/     # Component 3: aggregate statistics per category
# ├── pivot/        # Component 4: 1-D frequency and 2-D crosstab
# ├── cleaning/     # Component 5: selection + selective rewriter
# ├── document.py   # Orchestrator: bytes in, results / bytes out
# ├── config.py     # Configuration management
# ├── logging_config.py
# ├── exceptions.py
# └── cli.py        # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
