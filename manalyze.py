# Expression analysis: parse, evaluate against scope, clean up, classify and format one markup string.

from collections import OrderedDict
from collections.abc import Mapping
import os
import sys

import mkernel
from mkernel import EvaluationError, Value
from mparser import ParseError, parse

_EVAL_ERRORS = (EvaluationError, ValueError, TypeError, ZeroDivisionError) # NonInvertibleMatrixError is a ValueError

def _debug (*args):
	if os.environ.get ('MITRAS_DEBUG'):
		print (*args, file = sys.stderr)

#...............................................................................................
class Scope (Mapping):
	"""Immutable ordered mapping of variable name to Value. Assignment does not
	change a scope, it returns a new one with the name bound (or rebound) to
	the value."""

	__slots__ = ['_vars']

	def __init__ (self, vars = ()):
		self._vars = OrderedDict (vars)

	def __getitem__ (self, name):
		return self._vars [name]

	def __iter__ (self):
		return iter (self._vars)

	def __len__ (self):
		return len (self._vars)

	def __repr__ (self):
		return f'Scope ({list (self._vars.items ())!r})'

	def assign (self, name, value):
		vars         = OrderedDict (self._vars)
		vars [name]  = value

		return Scope (vars)

	def spt_vars (self): # name -> SymPy value mapping for the kernel
		return {name: value.val for name, value in self._vars.items ()}

class Analysis:
	__slots__ = ['evaluated_tex', 'evaluated_value', 'kind', 'last_func', 'last_args', 'is_assignment']

	def __init__ (self, evaluated_tex = '', evaluated_value = None, kind = None, last_func = '', last_args = (), is_assignment = False):
		self.evaluated_tex   = evaluated_tex
		self.evaluated_value = evaluated_value
		self.kind            = kind
		self.last_func       = last_func
		self.last_args       = tuple (last_args)
		self.is_assignment   = is_assignment

	def __repr__ (self):
		return f'Analysis ({", ".join (f"{s} = {getattr (self, s)!r}" for s in self.__slots__)})'

	def __eq__ (self, other):
		return isinstance (other, Analysis) and all (getattr (self, s) == getattr (other, s) for s in self.__slots__)

#...............................................................................................
def last_func (ast):
	"""Return the function node which determines how a result is drawn, found
	by descending into the last child at each level. A node without children
	which is not a function ends the search with nothing found, so a function
	under an earlier sibling of a leaf is not seen ('\\det (A) + x')."""

	while not ast.is_func:
		if ast.is_leaf:
			return None

		ast = ast.children [-1]

	return ast

def _eval_args (func, vars):
	if func is None:
		return ()

	try:
		return tuple (Value.from_spt (mkernel.fix_rounding (mkernel.evaluate (a, vars))) for a in func.args)
	except _EVAL_ERRORS as e:
		_debug ('args:', repr (e))

		return ()

def analyze (tex, scope = None):
	"""Analyze markup text against scope. Returns (Analysis, Scope), the scope
	returned only differs from the one passed in for a successful assignment."""

	if scope is None:
		scope = Scope ()

	try:
		ast = parse (tex)
	except ParseError as e:
		_debug ('parse error:', repr (tex), e)

		return Analysis (), scope

	func  = last_func (ast)
	fname = func.func if func else ''
	vars  = scope.spt_vars ()

	try:
		spt = mkernel.evaluate (ast, vars)
	except _EVAL_ERRORS as e:
		_debug ('eval error:', repr (tex), repr (e))

		return Analysis (last_func = fname, is_assignment = bool (ast.is_ass)), scope

	if isinstance (spt, str): # text is not a result
		return Analysis (), scope

	value = Value.from_spt (mkernel.fix_rounding (spt))
	args  = _eval_args (func, vars)

	try:
		evtex = value.tex (fname)
	except _EVAL_ERRORS as e:
		_debug ('tex error:', repr (tex), repr (e))

		evtex = ''

	_debug ('analyze:', repr (tex), '->', value, fname)

	if ast.is_ass:
		scope = scope.assign (ast.lhs.var, value)

	return Analysis (evtex, value, value.kind, fname, args, bool (ast.is_ass)), scope

def analyze_all (texs, scope = None):
	"""Analyze list of markup texts in order threading the scope from each
	to the next. Returns ([Analysis, ...], final Scope)."""

	if scope is None:
		scope = Scope ()

	analyses = []

	for tex in texs:
		analysis, scope = analyze (tex, scope)

		analyses.append (analysis)

	return analyses, scope
