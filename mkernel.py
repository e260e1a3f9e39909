# Convert between internal AST and SymPy values, numeric cleanup, classification and display.

import sys

import sympy as sp
from sympy.matrices import NonSquareMatrixError, ShapeError

EPSILON            = sys.float_info.epsilon

_DISPLAY_PRECISION = 6 # significant digits of floats shown in evaluated tex

_MAX_EXACT_BITS    = 1 << 16 # exact rational powers bigger than this are done in floating point
_MAX_EXACT_FACT    = 20000   # same for factorials of integers above this
_MAX_MAT_POW       = 1 << 12

class EvaluationError (ValueError): pass
class ClassificationMismatch (TypeError): pass

def set_display_precision (prec):
	global _DISPLAY_PRECISION
	_DISPLAY_PRECISION = prec

#...............................................................................................
def is_mat (spt):
	return isinstance (spt, sp.MatrixBase)

def is_vector (spt, n = None): # column matrix is the one dimensional vector
	return is_mat (spt) and spt.rows > 0 and spt.cols == 1 and (n is None or spt.rows == n)

def is_matrix (spt, n): # square n x n matrix
	return is_mat (spt) and spt.cols != 1 and spt.rows == n and spt.cols == n

def _is_scalar (spt):
	return not is_mat (spt) and isinstance (spt, sp.Expr) and spt.is_number

def _scalar (spt, func):
	if not _is_scalar (spt):
		raise EvaluationError (f'{func}() expects a scalar argument')

	return spt

def _vector (spt, func, n = None):
	if not is_vector (spt, n):
		raise EvaluationError (f'{func}() expects a {f"{n}-dimensional " if n else ""}vector argument')

	return spt

def _square (spt, func):
	if not is_mat (spt) or spt.rows != spt.cols:
		raise EvaluationError (f'{func}() expects a square matrix argument')

	return spt

#...............................................................................................
def _eigen_sorted (mat):
	mat   = sp.ImmutableMatrix (mat).applyfunc (lambda e: sp.nsimplify (e, rational = True))
	eigs  = mat.eigenvects ()
	key   = lambda e: (float (sp.re (e [0].evalf ())), float (sp.im (e [0].evalf ())))

	return sorted (eigs, key = key)

def _eigenvalues (mat):
	vals = []

	for val, mult, _ in _eigen_sorted (_square (mat, 'eigenvalues')):
		vals.extend ([val] * mult)

	return sp.ImmutableMatrix (vals)

def _eigenvectors (mat):
	cols = []

	for _, _, vecs in _eigen_sorted (_square (mat, 'eigenvectors')):
		for vec in vecs:
			vec = vec / vec.norm ()
			lead = next ((e for e in vec if e != 0), 1)

			if lead.is_real and lead < 0: # deterministic direction
				vec = -vec

			cols.append (vec)

	return sp.ImmutableMatrix (sp.Matrix.hstack (*cols))

def _det (mat):
	return _square (mat, 'det').det ()

def _inv (spt):
	return spt.inv () if is_mat (spt) else 1 / _scalar (spt, 'inv')

def _norm (spt):
	return spt.norm () if is_mat (spt) else sp.Abs (_scalar (spt, 'norm'))

def _cross (a, b):
	return sp.ImmutableMatrix (_vector (a, 'cross', 3).cross (_vector (b, 'cross', 3)))

def _dot (a, b):
	a, b = _vector (a, 'dot'), _vector (b, 'dot')

	if a.rows != b.rows:
		raise EvaluationError ('dot() vectors must have the same dimension')

	return a.dot (b)

def _proj (a, b): # projection of a onto b
	return sp.ImmutableMatrix (b * (_dot (a, b) / _dot (b, b)))

def _comp (a, b): # scalar component of a along b
	return _dot (a, b) / b.norm ()

def _transpose (spt):
	return spt.T if is_mat (spt) else spt

def _nth_root (x, n):
	x, n = _scalar (x, 'nthRoot'), _scalar (n, 'nthRoot')

	return sp.real_root (x, n) if x.is_real else sp.root (x, n)

def _abs (spt):
	if is_vector (spt):
		return spt.norm ()

	return spt.applyfunc (sp.Abs) if is_mat (spt) else sp.Abs (_scalar (spt, 'abs'))

def _log (x, base = None):
	return sp.log (_scalar (x, 'log')) if base is None else sp.log (x, _scalar (base, 'log'))

def _pow (base, exp):
	if base.is_Rational and exp.is_Integer and base not in (0, 1, -1):
		if max (abs (base.p).bit_length (), base.q.bit_length ()) * abs (int (exp)) > _MAX_EXACT_BITS:
			return sp.Float (base) ** exp

	return base ** exp

def _factorial (x):
	x = _scalar (x, 'factorial')

	if x.is_Integer and x > _MAX_EXACT_FACT:
		return sp.gamma (sp.Float (x) + 1)

	return sp.factorial (x)

def _scalar_func (spfunc, name):
	return lambda x: spfunc (_scalar (x, name))

_FUNCS = {
	'det'         : _det,
	'inv'         : _inv,
	'norm'        : _norm,
	'cross'       : _cross,
	'dot'         : _dot,
	'transpose'   : _transpose,
	'proj'        : _proj,
	'comp'        : _comp,
	'eigenvalues' : _eigenvalues,
	'eigenvectors': _eigenvectors,
	'sqrt'        : _scalar_func (sp.sqrt, 'sqrt'),
	'nthRoot'     : _nth_root,
	'abs'         : _abs,
	'exp'         : _scalar_func (sp.exp, 'exp'),
	'ln'          : _log,
	'log'         : _log,
	'sin'         : _scalar_func (sp.sin, 'sin'),
	'cos'         : _scalar_func (sp.cos, 'cos'),
	'tan'         : _scalar_func (sp.tan, 'tan'),
	'csc'         : _scalar_func (sp.csc, 'csc'),
	'sec'         : _scalar_func (sp.sec, 'sec'),
	'cot'         : _scalar_func (sp.cot, 'cot'),
	'asin'        : _scalar_func (sp.asin, 'asin'),
	'acos'        : _scalar_func (sp.acos, 'acos'),
	'atan'        : _scalar_func (sp.atan, 'atan'),
	'acsc'        : _scalar_func (sp.acsc, 'acsc'),
	'asec'        : _scalar_func (sp.asec, 'asec'),
	'acot'        : _scalar_func (sp.acot, 'acot'),
}

#...............................................................................................
class ast2spt: # abstract syntax tree -> sympy value, vars is mapping of variable names to sympy values
	def __init__ (self): self.vars = None # pylint kibble
	def __new__ (cls, ast, vars = {}):
		self      = super ().__new__ (cls)
		self.vars = vars

		return self._ast2spt (ast)

	def _ast2spt (self, ast):
		return self._ast2spt_funcs [ast.op] (self, ast)

	_ast2spt_consts = {
		'pi'   : sp.pi,
		'e'    : sp.E,
		'i'    : sp.I,
		'infty': sp.oo,
	}

	def _ast2spt_var (self, ast):
		spt = self._ast2spt_consts.get (ast.var)

		if spt is None:
			spt = self.vars.get (ast.var)

			if spt is None:
				raise EvaluationError (f'undefined symbol {ast.var!r}')

		return spt

	def _ast2spt_add (self, ast):
		itr = iter (ast.add)
		res = self._ast2spt (next (itr))

		for arg in itr:
			res = self._add (res, self._ast2spt (arg))

		return res

	def _ast2spt_mul (self, ast):
		itr = iter (ast.mul)
		res = self._ast2spt (next (itr))

		for arg in itr:
			res = self._mul (res, self._ast2spt (arg))

		return res

	def _ast2spt_div (self, ast):
		numer, denom = self._ast2spt (ast.numer), self._ast2spt (ast.denom)

		if is_mat (denom):
			return self._mul (numer, _square (denom, 'divide').inv ())

		if denom == 0:
			raise EvaluationError ('division by zero')

		return sp.ImmutableMatrix (numer / denom) if is_mat (numer) else numer / denom

	def _ast2spt_pow (self, ast):
		base, exp = self._ast2spt (ast.base), self._ast2spt (ast.exp)

		if not _is_scalar (exp):
			raise EvaluationError ('exponent must be a scalar')

		if is_mat (base):
			if not exp.is_integer:
				raise EvaluationError ('matrix power must be an integer')

			if abs (exp) > _MAX_MAT_POW:
				raise EvaluationError ('matrix power exponent too large')

			return sp.ImmutableMatrix (_square (base, 'pow') ** exp)

		return _pow (_scalar (base, 'pow'), exp)

	def _ast2spt_mat (self, ast):
		if not ast.mat:
			return sp.ImmutableMatrix ([])

		rows = [[self._ast2spt (e) for e in row] for row in ast.mat]

		if any (not _is_scalar (e) for row in rows for e in row):
			raise EvaluationError ('matrix elements must be scalars')

		return sp.ImmutableMatrix (rows)

	def _ast2spt_func (self, ast):
		func = _FUNCS.get (ast.func)

		if func is None:
			raise EvaluationError (f'unknown function {ast.func!r}')

		try:
			return func (*(self._ast2spt (a) for a in ast.args))
		except TypeError as e:
			if isinstance (e, ClassificationMismatch):
				raise

			raise EvaluationError (f'{ast.func}() {e.args [0] if e.args else "invalid arguments"}') from None

	@staticmethod
	def _add (a, b):
		if is_mat (a) and not is_mat (b):
			return a.applyfunc (lambda e: e + b)
		elif is_mat (b) and not is_mat (a):
			return b.applyfunc (lambda e: a + e)

		return a + b

	@staticmethod
	def _mul (a, b):
		if is_vector (a) and is_vector (b) and a.rows > 1: # vector * vector is the dot product
			return _dot (a, b)

		res = a * b

		return sp.ImmutableMatrix (res) if is_mat (res) else res

	_ast2spt_funcs = {
		'#': lambda self, ast: sp.Integer (ast.num) if ast.is_num_int else sp.Float (ast.num),
		'@': _ast2spt_var,
		'"': lambda self, ast: ast.str_,
		'=': lambda self, ast: self._ast2spt (ast.rhs),
		'(': lambda self, ast: self._ast2spt (ast.paren),
		'|': lambda self, ast: _abs (self._ast2spt (ast.abs)),
		'-': lambda self, ast: -self._ast2spt (ast.minus),
		'!': lambda self, ast: _factorial (self._ast2spt (ast.fact)),
		'+': _ast2spt_add,
		'*': _ast2spt_mul,
		'/': _ast2spt_div,
		'^': _ast2spt_pow,
		'-func': _ast2spt_func,
		'-mat': _ast2spt_mat,
	}

def evaluate (ast, vars = {}):
	try:
		return ast2spt (ast, vars)
	except (ShapeError, NonSquareMatrixError, ZeroDivisionError) as e: # NonInvertibleMatrixError is already a ValueError
		raise EvaluationError (str (e)) from None
	except TypeError as e:
		if isinstance (e, ClassificationMismatch):
			raise

		raise EvaluationError (str (e)) from None

#...............................................................................................
def _fix_part (part): # exact rationals stay exact, anything else becomes a float
	part = part if part.is_Rational else part.evalf ()

	return sp.Integer (0) if part.is_Float and abs (part) < EPSILON else part

def _fix_scalar (spt):
	if not _is_scalar (spt) or spt.is_finite is False:
		return spt

	re, im = (_fix_part (p) for p in spt.as_real_imag ())

	return re if im == 0 else re + im * sp.I

def fix_rounding (spt):
	"""Zero out any numeric component with magnitude below machine epsilon,
	recursing into matrix elements and the real and imaginary parts of complex
	numbers. Non-numeric values are returned unchanged."""

	if is_mat (spt):
		return sp.ImmutableMatrix (spt.applyfunc (_fix_scalar))

	return _fix_scalar (spt)

def type_of (spt): # raw type name before reclassification of one dimensional matrices
	if isinstance (spt, str):
		return 'string'
	elif is_mat (spt):
		return 'matrix' if spt.rows and spt.cols else None
	elif _is_scalar (spt):
		if spt.is_finite is False:
			return None

		return 'number' if spt.is_real or spt.as_real_imag () [1] == 0 else 'complex'

	return None

#...............................................................................................
def spt2tex (spt):
	if isinstance (spt, str):
		return f'\\text{{{spt}}}'

	if isinstance (spt, sp.Basic):
		spt = spt.xreplace ({f: sp.Float (f, _DISPLAY_PRECISION) for f in spt.atoms (sp.Float)})

	return sp.latex (spt, mat_str = 'bmatrix', mat_delim = '', full_prec = False)

def spt2tex_list (spts):
	return ',\\space '.join (spt2tex (s) for s in spts)

class Value:
	"""Evaluated and classified result. kind is one of 'number', 'complex',
	'vector', 'matrix', 'string' or None when the shape is not known, val is the SymPy
	payload (a column ImmutableMatrix for vectors)."""

	__slots__ = ['kind', 'val']

	def __init__ (self, kind, val):
		self.kind = kind
		self.val  = val

	def __repr__ (self):
		return f'Value ({self.kind!r}, {self.val!r})'

	def __eq__ (self, other):
		return isinstance (other, Value) and self.kind == other.kind and self.val == other.val

	@staticmethod
	def from_spt (spt):
		kind = type_of (spt)

		if kind == 'matrix' and is_vector (spt):
			kind = 'vector'

		return Value (kind, spt)

	@property
	def shape (self):
		if self.kind == 'vector':
			return (self.val.rows,)
		elif self.kind == 'matrix':
			return self.val.shape

		return ()

	def floats (self): # convert to plain Python floats once per use
		try:
			if self.kind == 'number':
				return float (self.val)
			elif self.kind == 'complex':
				return complex (self.val)
			elif self.kind == 'vector':
				return tuple (float (e) for e in self.val)
			elif self.kind == 'matrix':
				return tuple (tuple (float (self.val [r, c]) for c in range (self.val.cols)) for r in range (self.val.rows))

		except TypeError: # complex elements in vector or matrix
			pass

		raise ClassificationMismatch (f'value of kind {self.kind!r} has no real floating point form')

	def tex (self, last_func = ''):
		if last_func == 'eigenvalues' and is_mat (self.val):
			return spt2tex_list (self.val)

		if last_func == 'eigenvectors' and is_mat (self.val):
			return spt2tex_list (self.val.col (i) for i in range (self.val.cols))

		return spt2tex (self.val)
