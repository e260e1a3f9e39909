# Base classes for abstract math syntax tree, tuple based.
#
# ('#', 'num')                                        - real numbers represented as strings to pass on maximum precision to sympy
# ('@', 'var')                                        - variable name, can take forms: 'x', 'x_1', 'alpha'
# ('"', 'str')                                        - string, only from \text{...}
# ('=', lhs, rhs)                                     - assignment to Left-Hand-Side of Right-Hand-Side
# ('(', expr)                                         - explicit parentheses
# ('|', expr)                                         - absolute value or norm of vector
# ('-', expr)                                         - negative of expression
# ('!', expr)                                         - factorial
# ('+', (expr1, expr2, ...))                          - addition
# ('*', (expr1, expr2, ...))                          - multiplication, implicit or explicit
# ('/', numer, denom)                                 - fraction numer(ator) / denom(inator)
# ('^', base, exp)                                    - power base ^ exp(onent)
# ('-func', 'name', (a1, a2, ...))                    - function call to 'name ()' with arguments a1, a2, ...
# ('-mat', ((e11, e12, ...), (e21, e22, ...), ...))   - matrix, single column matrix is a vector

import re

#...............................................................................................
class AST (tuple):
	op      = None

	_OP2CLS = {} # these will be filled in after all classes defined
	_CLS2OP = {}

	def __new__ (cls, *args):
		op       = AST._CLS2OP.get (cls)
		cls_args = tuple (AST (*arg) if arg.__class__ is tuple else arg for arg in args)

		if op:
			args = (op,) + cls_args

		elif args:
			args = cls_args

			try:
				cls2 = AST._OP2CLS.get (args [0])
			except TypeError: # for unhashable types
				cls2 = None

			if cls2:
				cls      = cls2
				cls_args = cls_args [1:]

		self = tuple.__new__ (cls, args)

		if self.op:
			self._init (*cls_args)

		return self

	def __getattr__ (self, name): # calculate value for nonexistent self.name by calling self._name () and store
		func                 = getattr (self, f'_{name}') if name [0] != '_' else None
		val                  = func and func ()
		self.__dict__ [name] = val

		return val

	def _children (self): # sub-expressions in evaluation order, leaves have none
		return ()

	def _is_leaf (self):
		return not self.children

	@staticmethod
	def flatcat (op, ast0, ast1): # ,,,/O.o\,,,~~
		if ast0.op == op:
			if ast1.op == op:
				return AST (op, ast0 [1] + ast1 [1])
			return AST (op, ast0 [1] + (ast1,))
		elif ast1.op == op:
			return AST (op, (ast0,) + ast1 [1])
		return AST (op, (ast0, ast1))

	@staticmethod
	def register_AST (cls):
		AST._CLS2OP [cls]    = cls.op
		AST._OP2CLS [cls.op] = cls

		setattr (AST, cls.__name__ [4:], cls)

#...............................................................................................
class AST_Num (AST):
	op, is_num = '#', True

	_rec_num   = re.compile (r'^(-?)(\d*)(?:(\.)(\d*))?(?:([eE])([+-]?\d+))?$')

	def _init (self, num):
		self.num = str (num)

	_grp        = lambda self: [g or '' for g in AST_Num._rec_num.match (self.num).groups ()]
	_is_num_int = lambda self: not self.grp [2] and not self.grp [4]

class AST_Var (AST):
	op, is_var = '@', True

	GREEK      = ('alpha', 'beta', 'gamma', 'delta', 'epsilon', 'zeta', 'eta', 'theta', 'iota', 'kappa', 'lambda', 'mu', 'nu', 'xi', 'rho', 'sigma',
		'tau', 'upsilon', 'phi', 'chi', 'psi', 'omega', 'Gamma', 'Delta', 'Theta', 'Lambda', 'Xi', 'Pi', 'Sigma', 'Upsilon', 'Phi', 'Psi', 'Omega')
	CONSTS     = {'pi', 'e', 'i', 'infty'}

	def _init (self, var):
		self.var = var

	_is_var_const = lambda self: self.var in AST_Var.CONSTS

class AST_Str (AST):
	op, is_str = '"', True

	def _init (self, str_):
		self.str_ = str_

class AST_Ass (AST):
	op, is_ass = '=', True

	def _init (self, lhs, rhs):
		self.lhs, self.rhs = lhs, rhs

	_children = lambda self: (self.lhs, self.rhs)

class AST_Paren (AST):
	op, is_paren = '(', True

	def _init (self, paren):
		self.paren = paren

	_children = lambda self: (self.paren,)

class AST_Abs (AST):
	op, is_abs = '|', True

	def _init (self, abs):
		self.abs = abs

	_children = lambda self: (self.abs,)

class AST_Minus (AST):
	op, is_minus = '-', True

	def _init (self, minus):
		self.minus = minus

	_children = lambda self: (self.minus,)

class AST_Fact (AST):
	op, is_fact = '!', True

	def _init (self, fact):
		self.fact = fact

	_children = lambda self: (self.fact,)

class AST_Add (AST):
	op, is_add = '+', True

	def _init (self, add):
		self.add = add

	_children = lambda self: tuple (self.add)

class AST_Mul (AST):
	op, is_mul = '*', True

	def _init (self, mul):
		self.mul = mul

	_children = lambda self: tuple (self.mul)

class AST_Div (AST):
	op, is_div = '/', True

	def _init (self, numer, denom):
		self.numer, self.denom = numer, denom

	_children = lambda self: (self.numer, self.denom)

class AST_Pow (AST):
	op, is_pow = '^', True

	def _init (self, base, exp):
		self.base, self.exp = base, exp

	_children = lambda self: (self.base, self.exp)

class AST_Func (AST):
	op, is_func = '-func', True

	LINALG      = {'det', 'inv', 'norm', 'cross', 'dot', 'transpose', 'proj', 'comp', 'eigenvalues', 'eigenvectors'}
	TRIG        = {'sin', 'cos', 'tan', 'csc', 'sec', 'cot'}
	TEX         = TRIG | {'det', 'exp', 'ln', 'log', 'arcsin', 'arccos', 'arctan'} # functions written as \name

	TEX2PY      = {'arcsin': 'asin', 'arccos': 'acos', 'arctan': 'atan'}

	def _init (self, func, args):
		self.func, self.args = func, args

	_children = lambda self: tuple (self.args)

class AST_Mat (AST):
	op, is_mat = '-mat', True

	def _init (self, mat):
		self.mat = mat

	_children = lambda self: tuple (e for row in self.mat for e in row)

#...............................................................................................
_AST_CLASSES = [AST_Num, AST_Var, AST_Str, AST_Ass, AST_Paren, AST_Abs, AST_Minus, AST_Fact, AST_Add, AST_Mul, AST_Div,
	AST_Pow, AST_Func, AST_Mat]

for _cls in _AST_CLASSES:
	AST.register_AST (_cls)

AST.Pi       = AST ('@', 'pi')
AST.Infty    = AST ('@', 'infty')
AST.One      = AST ('#', '1')
AST.NegOne   = AST ('#', '-1')
AST.MatEmpty = AST ('-mat', ())
