"""
Central repository for table formatting defaults.

All defaults are exported via the CONFIG dictionary, which is the single source
of truth for values shared by the preparation, rendering and reporting modules.

Usage
-----
>>> from apatables import CONFIG
>>> print(CONFIG['DEFAULT_DIGITS'])
2
>>> print(CONFIG['TERMS']['note'])
Note

Note: CONFIG is read-only by convention. Per-call overrides are passed as
keyword arguments or through a RenderContext, never by mutating CONFIG.
"""

# ============================================================================
# CONFIG Dictionary - All Defaults in One Place
# ============================================================================

CONFIG = {
    # ========================================================================
    # Number formatting (printnum)
    # ========================================================================
    'DEFAULT_DIGITS': 2,            # Decimal digits for numeric cells
    'P_VALUE_DIGITS': 3,            # Decimal digits for p-values (printp)
    'NA_STRING': 'NA',              # Replacement for missing values

    # ========================================================================
    # Table layout
    # ========================================================================
    'STUB_FILLER': '\\ \\ \\ ',     # Non-breaking indent in LaTeX and pandoc
    'DEFAULT_PLACEMENT': 'tbp',     # Float placement preference
    'PLACEMENT_CHARS': 'htbp!H',    # Characters accepted in placement strings
    'DEFAULT_FIRST_ALIGN': 'l',     # Stub column alignment
    'DEFAULT_ALIGN': 'c',           # Alignment of all other columns
    'CMIDRULE_TRIM': 'r',           # Trim option of spanner partial rules

    # ========================================================================
    # Localized terms
    # ========================================================================
    'TERMS': {
        'note': 'Note',
        'table': 'Table',
    },

    # ========================================================================
    # LaTeX compilation check (compile_latex_table)
    # ========================================================================
    'LATEX_ENGINE': 'pdflatex',
    'LATEX_PACKAGES': [
        'booktabs',
        'threeparttable',
        'threeparttablex',
        'longtable',
        'pdflscape',
        'caption',
        'multirow',
        'amsmath',
    ],

    # ========================================================================
    # Logging
    # ========================================================================
    'LOGGER_NAME': 'apatables',
    'LOG_LEVEL_ENV': 'APATABLES_LOG_LEVEL',
}
