#!/usr/bin/env python3

import setuptools

setuptools.setup (
  name                          = "mitras",
  version                       = "1.0.0",
  keywords                      = "Math linear algebra graphing calculator SymPy matplotlib",
  description                   = "Graphing calculator for linear algebra: TeX expressions evaluated with SymPy, vectors and matrices drawn as geometry",
  long_description              = "Mitras evaluates a chained list of TeX math expressions against an accumulating variable scope using SymPy, classifies each result as number, vector or matrix "
    "and draws the geometric interpretation (vectors, transformed grids, determinant areas, eigenvector rays) on a pannable, zoomable coordinate grid rendered with matplotlib. "
    "Matrix transformations can be animated from the identity to their final state.",
  long_description_content_type = "text/plain",
  py_modules                    = ['mast', 'mparser', 'mkernel', 'manalyze', 'msurface', 'mdraw', 'mframes', 'mexprs', 'mgraph', 'server'],
  entry_points                  = {'console_scripts': ['mitras = server:main']},
  classifiers                   = [
    'Intended Audience :: Education',
    'Intended Audience :: Science/Research',
    'Operating System :: OS Independent',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Scientific/Engineering',
    'Topic :: Scientific/Engineering :: Mathematics',
  ],
  install_requires              = ['sympy>=1.4', 'matplotlib>=3.0'],
  extras_require                = {'test': ['requests']},
  python_requires               = '>=3.6',
)
