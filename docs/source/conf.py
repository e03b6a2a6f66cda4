# Sphinx configuration for the starfold documentation.
#
# Build with ``sphinx-build -b html docs/source docs/build`` from the
# repository root.

import os
import sys

# starfold has no __init__.py, autodoc imports it from the repository root.
sys.path.insert(0, os.path.abspath('../..'))


# -- Project information -----------------------------------------------------

project = 'starfold'
copyright = '2024, m3shware'
author = 'm3shware'
release = '1.0'


# -- General configuration ---------------------------------------------------

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.autosummary',
    'sphinx.ext.doctest',
    'sphinx.ext.intersphinx',
    'sphinx.ext.mathjax',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
]

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'numpy': ('https://numpy.org/doc/stable', None),
}

# Docstrings are numpydoc, no Google style sections.
napoleon_google_docstring = False
napoleon_use_rtype = False

autosummary_generate = True
autodoc_member_order = 'bysource'
autodoc_default_options = {
    'members': True,
    'show-inheritance': True,
}

templates_path = ['_templates']
exclude_patterns = []

toc_object_entries = False


def skip(app, what, name, obj, skip, options):
    # Constructor parameters are documented with the class.
    if name in ('__init__', '__new__', '__repr__'):
        return True

    return None


def setup(app):
    app.connect('autodoc-skip-member', skip)


# -- Options for HTML output -------------------------------------------------

html_theme = 'sphinx_rtd_theme'
html_title = 'starfold: folding stars into polyhedra'
html_theme_options = {
    'navigation_depth': 2,
    'collapse_navigation': False,
}
html_static_path = []
html_show_sourcelink = False
