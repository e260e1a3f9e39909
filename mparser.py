# Builds expression tree from TeX markup, nodes are nested AST tuples.

from collections import OrderedDict
import os
import re
import sys

from mast import AST

class ParseError (SyntaxError): pass

_NEG_ONE = AST ('-', AST.One)

#...............................................................................................
class Token (str):
	__slots__ = ['text', 'pos', 'grp']

	def __new__ (cls, str_, text = None, pos = None, grps = None):
		self      = str.__new__ (cls, str_)
		self.text = text or ''
		self.pos  = pos
		self.grp  = () if not grps else grps

		return self

def _expr_mat (rows, env):
	if not rows or rows == [[]]:
		return AST.MatEmpty

	cols = max (len (r) for r in rows)

	if not all (len (r) == cols for r in rows):
		raise ParseError ('matrix rows must all have the same number of columns')

	mat = AST ('-mat', tuple (tuple (r) for r in rows))

	return AST ('-func', 'det', (mat,)) if env == 'vmatrix' else mat

def _expr_func (func, args, sup = None):
	if sup is not None:
		if sup in (AST.NegOne, _NEG_ONE) and func in AST.Func.TRIG: # \sin^{-1} x -> asin (x)
			return AST ('-func', f'a{func}', args)

		return AST ('^', AST ('-func', func, args), sup)

	return AST ('-func', func, args)

def _expr_sup (base, sup):
	if sup is True: # transpose marker
		return AST ('-func', 'transpose', (base,))

	return AST ('^', base, sup)

def _expr_var (VAR):
	if VAR.grp [0]: # \greek
		var = VAR.grp [0]
	else:
		var = VAR.grp [1]

	sub = VAR.grp [2] or VAR.grp [3]

	return AST ('@', f'{var}_{sub}' if sub else var)

#...............................................................................................
class Parser:
	_LTR      = r'[a-zA-Z]'

	_GREEK    = '(?:' + '|'.join (sorted (AST.Var.GREEK, key = len, reverse = True)) + ')'
	_FUNCTEX  = '(?:' + '|'.join (sorted (AST.Func.TEX, key = len, reverse = True)) + ')'
	_FUNCOP   = '(?:' + '|'.join (sorted (AST.Func.LINALG | {'abs'}, key = len, reverse = True)) + ')'

	TOKENS    = OrderedDict ([ # order matters due to Python regex non-greedy or operator '|'
		('BEG_MAT',       r'\\begin\s*{\s*(matrix|bmatrix|pmatrix|vmatrix)\s*}'),
		('END_MAT',       r'\\end\s*{\s*(matrix|bmatrix|pmatrix|vmatrix)\s*}'),
		('FUNC',         fr'\\({_FUNCTEX})(?!{_LTR})|\\(?:operatorname|mathrm|text)\s*{{\s*({_FUNCOP})\s*}}'),
		('TEXT',          r'\\text\s*{([^}]*)}'),
		('SQRT',         fr'\\sqrt(?!{_LTR})'),
		('FRAC',         fr'\\[dt]?frac(?!{_LTR})'),
		('L_PARENL',      r'\\left\s*\('),
		('R_PARENR',      r'\\right\s*\)'),
		('L_BAR',         r'\\left\s*(?:\||\\vert(?![a-zA-Z]))'),
		('R_BAR',         r'\\right\s*(?:\||\\vert(?![a-zA-Z]))'),
		('L_DBAR',        r'\\left\s*(?:\\\||\\Vert(?![a-zA-Z]))'),
		('R_DBAR',        r'\\right\s*(?:\\\||\\Vert(?![a-zA-Z]))'),
		('CDOT',         fr'\\cdot(?!{_LTR})|\\ast(?!{_LTR})|\*'),
		('TIMES',        fr'\\times(?!{_LTR})'),
		('DIVIDE',       fr'\\div(?!{_LTR})|/'),
		('TRANSPOSE',    fr'\\top(?!{_LTR})|\\intercal(?!{_LTR})'),
		('PI',           fr'\\pi(?!{_LTR})'),
		('INFTY',        fr'\\infty(?!{_LTR})'),
		('NUM',           r'\d+(?:\.\d*)?|\.\d+'),
		('VAR',          fr'(?:\\({_GREEK})(?!{_LTR})|({_LTR}))(?:_{{\s*(\w+)\s*}}|_(\w))?'),
		('SUB',           r'_'),
		('CARET',         r'\^'),
		('DBLSLASH',      r'\\\\'),
		('DBAR',          r'\\\|'),
		('CURLYL',        r'{'),
		('CURLYR',        r'}'),
		('PARENL',        r'\('),
		('PARENR',        r'\)'),
		('BRACKL',        r'\['),
		('BRACKR',        r'\]'),
		('BAR',           r'\|'),
		('PLUS',          r'\+'),
		('MINUS',         r'-'),
		('EXCL',          r'!'),
		('AMP',           r'&'),
		('COMMA',         r','),
		('EQ',            r'='),
		('ignore',        r'\\[,:;!]|\\?\s+|\\(?:quad|qquad|space|displaystyle)(?![a-zA-Z])|\\left\s*\.|\\right\s*\.'),
	])

	_IMPLICIT = {'NUM', 'VAR', 'PI', 'INFTY', 'FUNC', 'SQRT', 'FRAC', 'TEXT', 'PARENL', 'L_PARENL', 'CURLYL', 'L_BAR', 'L_DBAR', 'BEG_MAT'} # tokens which can start an implicit multiplication

	def __init__ (self):
		self.set_tokens (self.TOKENS)

	def set_tokens (self, tokens):
		self.tokgrps = {} # {'token': (groups pos start, groups pos end), ...}
		tokpats      = list (tokens.items ())
		pos          = 0

		for tok, pat in tokpats:
			l                   = re.compile (pat).groups + 1
			self.tokgrps [tok]  = (pos, pos + l)
			pos                += l

		self.tokre   = '|'.join (f'(?P<{tok}>{pat})' for tok, pat in tokpats)
		self.tokrec  = re.compile (self.tokre)

	def tokenize (self, text):
		tokens = []
		end    = len (text)
		pos    = 0

		while pos < end:
			m = self.tokrec.match (text, pos)

			if m is None:
				tokens.append (Token ('$err', text [pos], pos))

				break

			else:
				if m.lastgroup != 'ignore':
					tok  = m.lastgroup
					s, e = self.tokgrps [tok]
					grps = m.groups () [s : e]

					tokens.append (Token (tok, grps [0], pos, grps [1:]))

				pos += len (m.group (0))

		tokens.append (Token ('$end', '', pos))

		return tokens

	#...............................................................................................
	def _tok (self):
		return self.tokens [self.tokidx]

	def _next (self):
		tok          = self.tokens [self.tokidx]
		self.tokidx += 1

		return tok

	def _expect (self, *toks):
		tok = self._tok ()

		if tok not in toks:
			self._error (tok)

		self.tokidx += 1

		return tok

	def _error (self, tok):
		raise ParseError ( \
			'unexpected end of input' if tok == '$end' else \
			f'invalid token {tok.text!r}' if tok == '$err' else \
			f'invalid syntax {self.text [tok.pos : tok.pos + 16]!r}')

	def expr_ass (self):
		lhs = self.expr_add ()

		if self._tok () != 'EQ':
			return lhs

		self._next ()

		rhs = self.expr_add ()

		if not lhs.is_var:
			raise ParseError ('can only assign to a variable')
		elif lhs.is_var_const:
			raise ParseError (f'cannot assign to constant {lhs.var!r}')

		return AST ('=', lhs, rhs)

	def expr_add (self):
		ast = self.expr_mul ()

		while self._tok () in {'PLUS', 'MINUS'}:
			if self._next () == 'PLUS':
				ast = AST.flatcat ('+', ast, self.expr_mul ())
			else:
				ast = AST.flatcat ('+', ast, AST ('-', self.expr_mul ()))

		return ast

	def expr_mul (self):
		ast = self.expr_neg ()

		while 1:
			tok = self._tok ()

			if tok in {'CDOT', 'TIMES'}:
				self._next ()

				ast = AST.flatcat ('*', ast, self.expr_neg ())

			elif tok == 'DIVIDE':
				self._next ()

				ast = AST ('/', ast, self.expr_neg ())

			elif tok in self._IMPLICIT:
				ast = AST.flatcat ('*', ast, self.expr_pow ())

			else:
				return ast

	def expr_neg (self):
		if self._tok () == 'MINUS':
			self._next ()

			return AST ('-', self.expr_neg ())

		if self._tok () == 'PLUS':
			self._next ()

			return self.expr_neg ()

		return self.expr_pow ()

	def expr_pow (self):
		ast = self.expr_fact ()

		while self._tok () == 'CARET':
			self._next ()

			ast = _expr_sup (ast, self.expr_super ())

		return ast

	def expr_super (self): # returns True for transpose
		tok = self._tok ()

		if tok == 'TRANSPOSE' or (tok == 'VAR' and tok.text == 'T'):
			self._next ()

			return True

		if tok == 'CURLYL':
			self._next ()

			if self._tok () == 'TRANSPOSE' or (self._tok () == 'VAR' and self._tok ().text == 'T' and self.tokens [self.tokidx + 1] == 'CURLYR'):
				self.tokidx += 2

				return True

			ast = self.expr_add ()

			self._expect ('CURLYR')

			return ast

		if tok == 'NUM' and len (tok.text) > 1: # x^23 -> x^2 * 3 as in TeX
			self.tokens [self.tokidx] = Token ('NUM', tok.text [1:], tok.pos + 1)

			return AST ('#', tok.text [0])

		if tok == 'MINUS':
			self._next ()

			return AST ('-', self.expr_super ())

		return self.expr_fact ()

	def expr_fact (self):
		ast = self.expr_term ()

		while self._tok () == 'EXCL':
			self._next ()

			ast = AST ('!', ast)

		return ast

	def expr_group (self): # {expr} or single token term for \frac12 and \sqrt2
		if self._tok () == 'CURLYL':
			self._next ()

			ast = self.expr_add ()

			self._expect ('CURLYR')

			return ast

		tok = self._tok ()

		if tok == 'NUM' and len (tok.text) > 1:
			self.tokens [self.tokidx] = Token ('NUM', tok.text [1:], tok.pos + 1)

			return AST ('#', tok.text [0])

		return self.expr_term ()

	def expr_args (self): # function arguments, parenthesized comma list or single term
		tok = self._tok ()

		if tok in {'PARENL', 'L_PARENL'}:
			self._next ()

			args = [self.expr_add ()]

			while self._tok () == 'COMMA':
				self._next ()
				args.append (self.expr_add ())

			self._expect ('PARENR' if tok == 'PARENL' else 'R_PARENR')

			return tuple (args)

		return (self.expr_pow (),)

	def expr_func (self, FUNC):
		func = FUNC.grp [0] or FUNC.grp [1]
		func = AST.Func.TEX2PY.get (func, func)
		sup  = base = None

		if func == 'log' and self._tok () == 'SUB':
			self._next ()

			base = self.expr_group ()

		if self._tok () == 'CARET':
			self._next ()

			sup = self.expr_super ()

			if sup is True:
				raise ParseError ('cannot transpose a function name')

		args = self.expr_args ()

		if func == 'log':
			args = args + ((base if base is not None else AST ('#', '10')),)

		return _expr_func (func, args, sup)

	def expr_mat (self, BEG):
		rows = [[]]

		if self._tok () == 'END_MAT':
			self._next ()

			return _expr_mat ([], BEG.grp [0])

		rows [-1].append (self.expr_add ())

		while 1:
			tok = self._next ()

			if tok == 'AMP':
				rows [-1].append (self.expr_add ())

			elif tok == 'DBLSLASH':
				if self._tok () == 'END_MAT': # trailing \\ before \end
					continue

				rows.append ([self.expr_add ()])

			elif tok == 'END_MAT':
				if tok.grp [0] != BEG.grp [0]:
					raise ParseError (f'\\begin{{{BEG.grp [0]}}} ended by \\end{{{tok.grp [0]}}}')

				return _expr_mat (rows, BEG.grp [0])

			else:
				self._error (tok)

	def expr_term (self):
		tok = self._next ()

		if tok == 'NUM':
			return AST ('#', tok.text if tok.text [0] != '.' else f'0{tok.text}')

		elif tok == 'VAR':
			return _expr_var (tok)

		elif tok == 'PI':
			return AST.Pi

		elif tok == 'INFTY':
			return AST.Infty

		elif tok == 'TEXT':
			return AST ('"', tok.grp [0])

		elif tok == 'FUNC':
			return self.expr_func (tok)

		elif tok == 'SQRT':
			if self._tok () == 'BRACKL':
				self._next ()

				idx = self.expr_add ()

				self._expect ('BRACKR')

				return AST ('-func', 'nthRoot', (self.expr_group (), idx))

			return AST ('-func', 'sqrt', (self.expr_group (),))

		elif tok == 'FRAC':
			numer = self.expr_group ()
			denom = self.expr_group ()

			return AST ('/', numer, denom)

		elif tok in {'PARENL', 'L_PARENL'}:
			ast = self.expr_add ()

			self._expect ('PARENR' if tok == 'PARENL' else 'R_PARENR')

			return AST ('(', ast)

		elif tok == 'CURLYL':
			ast = self.expr_add ()

			self._expect ('CURLYR')

			return ast

		elif tok in {'L_BAR', 'BAR'}:
			ast = self.expr_add ()

			self._expect ('R_BAR' if tok == 'L_BAR' else 'BAR')

			return AST ('|', ast)

		elif tok in {'L_DBAR', 'DBAR'}:
			ast = self.expr_add ()

			self._expect ('R_DBAR' if tok == 'L_DBAR' else 'DBAR')

			return AST ('-func', 'norm', (ast,))

		elif tok == 'BEG_MAT':
			return self.expr_mat (tok)

		self._error (tok)

	#...............................................................................................
	def parse (self, text):
		if not text.strip ():
			raise ParseError ('empty expression')

		self.text   = text
		self.tokens = self.tokenize (text)
		self.tokidx = 0

		ast = self.expr_ass ()

		if self._tok () != '$end':
			self._error (self._tok ())

		if os.environ.get ('MITRAS_DEBUG'):
			print ('parse:', ast, file = sys.stderr)

		return ast

_PARSER = Parser ()

def parse (text):
	return _PARSER.parse (text)
