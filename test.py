#!/usr/bin/env python

import base64
import json
import re
import unittest

import sympy as sp

from mast import AST
from mparser import ParseError, Parser
from mkernel import ClassificationMismatch, Value, evaluate, fix_rounding, set_display_precision
from manalyze import Analysis, Scope, analyze, analyze_all, last_func
from mexprs import ExprList, matrix_tex, random_color
from mframes import AnimationState

parser = Parser ()
p      = lambda s: parser.parse (s)

M22    = r'\begin{bmatrix}1&2\\3&4\end{bmatrix}'
I22    = r'\begin{bmatrix}1&0\\0&1\end{bmatrix}'

def mat (*rows):
	return sp.ImmutableMatrix (rows)

class Test (unittest.TestCase):
	def test_mparser (self):
		self.assertEqual (p ('1'), AST ('#', '1'))
		self.assertEqual (p ('1.5'), AST ('#', '1.5'))
		self.assertEqual (p ('.5'), AST ('#', '0.5'))
		self.assertEqual (p ('x'), AST ('@', 'x'))
		self.assertEqual (p ('x_1'), AST ('@', 'x_1'))
		self.assertEqual (p ('x_{10}'), AST ('@', 'x_10'))
		self.assertEqual (p ('\\alpha'), AST ('@', 'alpha'))
		self.assertEqual (p ('\\pi'), AST ('@', 'pi'))
		self.assertEqual (p ('-x'), AST ('-', ('@', 'x')))
		self.assertEqual (p ('-1'), AST ('-', ('#', '1')))
		self.assertEqual (p ('x+y'), AST ('+', (('@', 'x'), ('@', 'y'))))
		self.assertEqual (p ('x-y'), AST ('+', (('@', 'x'), ('-', ('@', 'y')))))
		self.assertEqual (p ('x+y+z'), AST ('+', (('@', 'x'), ('@', 'y'), ('@', 'z'))))
		self.assertEqual (p ('2x'), AST ('*', (('#', '2'), ('@', 'x'))))
		self.assertEqual (p ('x\\cdot y'), AST ('*', (('@', 'x'), ('@', 'y'))))
		self.assertEqual (p ('x\\times y'), AST ('*', (('@', 'x'), ('@', 'y'))))
		self.assertEqual (p ('x*y'), AST ('*', (('@', 'x'), ('@', 'y'))))
		self.assertEqual (p ('x/y'), AST ('/', ('@', 'x'), ('@', 'y')))
		self.assertEqual (p ('x\\div y'), AST ('/', ('@', 'x'), ('@', 'y')))
		self.assertEqual (p ('\\frac{1}{2}'), AST ('/', ('#', '1'), ('#', '2')))
		self.assertEqual (p ('\\frac12'), AST ('/', ('#', '1'), ('#', '2')))
		self.assertEqual (p ('\\dfrac{x}{y}'), AST ('/', ('@', 'x'), ('@', 'y')))
		self.assertEqual (p ('x^2'), AST ('^', ('@', 'x'), ('#', '2')))
		self.assertEqual (p ('x^{10}'), AST ('^', ('@', 'x'), ('#', '10')))
		self.assertEqual (p ('x^23'), AST ('*', (('^', ('@', 'x'), ('#', '2')), ('#', '3'))))
		self.assertEqual (p ('x!'), AST ('!', ('@', 'x')))
		self.assertEqual (p ('(x)'), AST ('(', ('@', 'x')))
		self.assertEqual (p ('\\left(x\\right)'), AST ('(', ('@', 'x')))
		self.assertEqual (p ('|x|'), AST ('|', ('@', 'x')))
		self.assertEqual (p ('\\left|x\\right|'), AST ('|', ('@', 'x')))
		self.assertEqual (p ('\\|x\\|'), AST ('-func', 'norm', (('@', 'x'),)))
		self.assertEqual (p ('\\text{hello}'), AST ('"', 'hello'))
		self.assertEqual (p ('a=2'), AST ('=', ('@', 'a'), ('#', '2')))
		self.assertEqual (p ('a = b + 1'), AST ('=', ('@', 'a'), ('+', (('@', 'b'), ('#', '1')))))

	def test_mparser_funcs (self):
		self.assertEqual (p ('\\sin x'), AST ('-func', 'sin', (('@', 'x'),)))
		self.assertEqual (p ('\\sin(x)'), AST ('-func', 'sin', (('@', 'x'),)))
		self.assertEqual (p ('\\sin^2 x'), AST ('^', ('-func', 'sin', (('@', 'x'),)), ('#', '2')))
		self.assertEqual (p ('\\sin^{-1} x'), AST ('-func', 'asin', (('@', 'x'),)))
		self.assertEqual (p ('\\arcsin x'), AST ('-func', 'asin', (('@', 'x'),)))
		self.assertEqual (p ('\\ln x'), AST ('-func', 'ln', (('@', 'x'),)))
		self.assertEqual (p ('\\log x'), AST ('-func', 'log', (('@', 'x'), ('#', '10'))))
		self.assertEqual (p ('\\log_2 8'), AST ('-func', 'log', (('#', '8'), ('#', '2'))))
		self.assertEqual (p ('\\log_{2}(x)'), AST ('-func', 'log', (('@', 'x'), ('#', '2'))))
		self.assertEqual (p ('\\sqrt{x}'), AST ('-func', 'sqrt', (('@', 'x'),)))
		self.assertEqual (p ('\\sqrt2'), AST ('-func', 'sqrt', (('#', '2'),)))
		self.assertEqual (p ('\\sqrt[3]{x}'), AST ('-func', 'nthRoot', (('@', 'x'), ('#', '3'))))
		self.assertEqual (p ('\\det(A)'), AST ('-func', 'det', (('@', 'A'),)))
		self.assertEqual (p ('\\det A'), AST ('-func', 'det', (('@', 'A'),)))
		self.assertEqual (p ('\\operatorname{eigenvalues}(A)'), AST ('-func', 'eigenvalues', (('@', 'A'),)))
		self.assertEqual (p ('\\operatorname{cross}(a, b)'), AST ('-func', 'cross', (('@', 'a'), ('@', 'b'))))
		self.assertEqual (p ('\\mathrm{inv}\\left(A\\right)'), AST ('-func', 'inv', (('@', 'A'),)))
		self.assertEqual (p ('A^T'), AST ('-func', 'transpose', (('@', 'A'),)))
		self.assertEqual (p ('A^{T}'), AST ('-func', 'transpose', (('@', 'A'),)))
		self.assertEqual (p ('A^\\top'), AST ('-func', 'transpose', (('@', 'A'),)))
		self.assertEqual (p ('A^{-1}'), AST ('^', ('@', 'A'), ('-', ('#', '1'))))

	def test_mparser_matrices (self):
		self.assertEqual (p (M22), AST ('-mat', ((('#', '1'), ('#', '2')), (('#', '3'), ('#', '4')))))
		self.assertEqual (p (r'\begin{bmatrix}1\\2\end{bmatrix}'), AST ('-mat', ((('#', '1'),), (('#', '2'),))))
		self.assertEqual (p (r'\begin{bmatrix}1\\2\\\end{bmatrix}'), AST ('-mat', ((('#', '1'),), (('#', '2'),))))
		self.assertEqual (p (r'\begin{pmatrix}x&y\end{pmatrix}'), AST ('-mat', ((('@', 'x'), ('@', 'y')),)))
		self.assertEqual (p (r'\begin{vmatrix}1&2\\3&4\end{vmatrix}'), AST ('-func', 'det', (('-mat', ((('#', '1'), ('#', '2')), (('#', '3'), ('#', '4')))),)))
		self.assertEqual (p (r'\begin{bmatrix}\end{bmatrix}'), AST.MatEmpty)
		self.assertEqual (p (f'2{M22}'), AST ('*', (('#', '2'), ('-mat', ((('#', '1'), ('#', '2')), (('#', '3'), ('#', '4')))))))
		self.assertTrue (p (M22).is_mat)

	def test_mparser_errors (self):
		for text in ('', '   ', '1+', '(1', 'x)', '\\foo', r'\begin{bmatrix}1&2\\3\end{bmatrix}', r'\begin{bmatrix}1\end{pmatrix}',
				'2=x', '\\pi=3', 'a=b=1', matrix_tex (2, 2)):
			self.assertRaises (ParseError, p, text)

		self.assertTrue (issubclass (ParseError, SyntaxError))

	def test_ast (self):
		ast = p ('x + \\det(A) y')

		self.assertEqual (ast.children, (AST ('@', 'x'), p ('\\det(A) y')))
		self.assertEqual (p ('a = 1').children, (AST ('@', 'a'), AST.One))
		self.assertTrue (p ('e').is_var_const)
		self.assertFalse (p ('x').is_var_const)
		self.assertTrue (p ('x').is_leaf)
		self.assertFalse (ast.is_leaf)
		self.assertIsNone (p ('x').is_ass)
		self.assertEqual (AST.flatcat ('+', p ('x+y'), p ('z')), p ('x+y+z'))
		self.assertIs (p ('x').__class__, AST.Var)

	def test_last_func (self):
		lf = lambda s: (last_func (p (s)) or AST ('-func', '', ())).func

		self.assertEqual (lf ('1'), '')
		self.assertEqual (lf ('a+b'), '')
		self.assertEqual (lf ('\\det(A)'), 'det')
		self.assertEqual (lf ('d = \\det(A)'), 'det')
		self.assertEqual (lf ('x + \\det(A)'), 'det')
		self.assertEqual (lf ('\\det(A) + x'), '')
		self.assertEqual (lf ('2\\operatorname{eigenvectors}(A)'), 'eigenvectors')
		self.assertEqual (lf ('\\operatorname{inv}(\\det(A))'), 'inv')
		self.assertEqual (lf ('\\det(A)^2'), '')
		self.assertEqual (lf ('(\\det A)'), 'det')

	def test_kernel (self):
		e = lambda s, vars = {}: evaluate (p (s), vars)

		self.assertEqual (e ('1+2'), 3)
		self.assertEqual (e ('2\\cdot3'), 6)
		self.assertEqual (e ('\\frac{1}{2}'), sp.Rational (1, 2))
		self.assertEqual (e ('x^2', {'x': sp.Integer (3)}), 9)
		self.assertEqual (e ('3!'), 6)
		self.assertEqual (e ('|-3|'), 3)
		self.assertEqual (e ('\\log_2 8'), 3)
		self.assertEqual (e ('\\log 1000'), 3)
		self.assertEqual (e ('\\ln e'), 1)
		self.assertEqual (e ('\\sqrt[3]{-8}'), -2)
		self.assertEqual (e ('i^2'), -1)
		self.assertEqual (e ('\\sin(0)'), 0)
		self.assertEqual (e (M22), mat ((1, 2), (3, 4)))
		self.assertEqual (e (f'\\det({M22})'), -2)
		self.assertEqual (e (f'\\det {M22}'), -2)
		self.assertEqual (e (r'\begin{vmatrix}1&2\\3&4\end{vmatrix}'), -2)
		self.assertEqual (e (f'{M22}^T'), mat ((1, 3), (2, 4)))
		self.assertEqual (e (f'{M22}^2'), mat ((7, 10), (15, 22)))
		self.assertEqual (e (f'{M22}^{{-1}}'), mat ((-2, 1), (sp.Rational (3, 2), sp.Rational (-1, 2))))
		self.assertEqual (e (f'\\operatorname{{inv}}({I22})'), mat ((1, 0), (0, 1)))
		self.assertEqual (e (f'{M22}{I22}'), mat ((1, 2), (3, 4)))
		self.assertEqual (e (f'{M22}+1'), mat ((2, 3), (4, 5)))
		self.assertEqual (e (f'2{M22}'), mat ((2, 4), (6, 8)))
		self.assertEqual (e (f'{M22}/2'), mat ((sp.Rational (1, 2), 1), (sp.Rational (3, 2), 2)))
		self.assertEqual (e (r'\begin{bmatrix}1\\2\end{bmatrix}\cdot\begin{bmatrix}3\\4\end{bmatrix}'), 11)
		self.assertEqual (e (r'\operatorname{dot}(\begin{bmatrix}1\\2\end{bmatrix}, \begin{bmatrix}3\\4\end{bmatrix})'), 11)
		self.assertEqual (e (r'\operatorname{cross}(\begin{bmatrix}1\\0\\0\end{bmatrix}, \begin{bmatrix}0\\1\\0\end{bmatrix})'), mat ((0,), (0,), (1,)))
		self.assertEqual (e (r'\|\begin{bmatrix}3\\4\end{bmatrix}\|'), 5)
		self.assertEqual (e (r'\left|\begin{bmatrix}3\\4\end{bmatrix}\right|'), 5)
		self.assertEqual (e (r'\operatorname{norm}(\begin{bmatrix}3\\4\end{bmatrix})'), 5)
		self.assertEqual (e (r'\operatorname{proj}(\begin{bmatrix}2\\3\end{bmatrix}, \begin{bmatrix}1\\0\end{bmatrix})'), mat ((2,), (0,)))
		self.assertEqual (e (r'\operatorname{comp}(\begin{bmatrix}2\\3\end{bmatrix}, \begin{bmatrix}0\\2\end{bmatrix})'), 3)
		self.assertEqual (e (r'\operatorname{eigenvalues}(\begin{bmatrix}3&0\\0&2\end{bmatrix})'), mat ((2,), (3,)))
		self.assertEqual (e (r'\operatorname{eigenvectors}(\begin{bmatrix}2&0\\0&3\end{bmatrix})'), mat ((1, 0), (0, 1)))
		self.assertEqual (e (r'\operatorname{eigenvectors}(\begin{bmatrix}2&0\\0&-3\end{bmatrix})'), mat ((0, 1), (1, 0)))
		self.assertEqual (e ('\\text{hi}'), 'hi')
		self.assertEqual (e ('2^{100}'), sp.Integer (2) ** 100)
		self.assertTrue (e ('2^{100}').is_Integer)
		self.assertTrue (e ('9^{9^{9}}').is_Float)
		self.assertTrue (e ('\\frac{1}{3}^{100000}').is_Float)
		self.assertTrue (e ('(10^{9})!').is_Float)
		self.assertEqual (e ('20!'), 2432902008176640000)

	def test_kernel_errors (self):
		from mkernel import EvaluationError

		e = lambda s, vars = {}: evaluate (p (s), vars)

		self.assertRaises (EvaluationError, e, 'x')
		self.assertRaises (EvaluationError, e, '1/0')
		self.assertRaises (EvaluationError, e, f'{M22}\\begin{{bmatrix}}1\\\\2\\\\3\\end{{bmatrix}}')
		self.assertRaises (EvaluationError, e, r'\det(\begin{bmatrix}1&2\end{bmatrix})')
		self.assertRaises (EvaluationError, e, r'\operatorname{cross}(1, 2)')
		self.assertRaises (EvaluationError, e, r'\operatorname{dot}(\begin{bmatrix}1\\2\end{bmatrix}, \begin{bmatrix}1\\2\\3\end{bmatrix})')
		self.assertRaises (EvaluationError, e, f'\\sin({M22})')
		self.assertRaises (EvaluationError, e, f'2^{{{M22}}}')
		self.assertRaises (EvaluationError, e, f'{M22}^{{0.5}}')
		self.assertRaises (EvaluationError, e, '2^{\\text{a}}')
		self.assertRaises (EvaluationError, e, '\\text{a}^2')
		self.assertRaises (EvaluationError, e, f'{M22}^{{10000}}')
		self.assertRaises (EvaluationError, e, r'\operatorname{dot}(\begin{bmatrix}1\\2\end{bmatrix})')
		self.assertRaises (ValueError, e, r'\begin{bmatrix}1&2\\2&4\end{bmatrix}^{-1}')
		self.assertTrue (issubclass (EvaluationError, ValueError))
		self.assertTrue (issubclass (ClassificationMismatch, TypeError))

	def test_fix_rounding (self):
		self.assertEqual (fix_rounding (sp.Float ('1e-17')), 0)
		self.assertEqual (fix_rounding (sp.Float ('-1e-17')), 0)
		self.assertEqual (fix_rounding (sp.Float ('1e-10')), sp.Float ('1e-10'))
		self.assertEqual (fix_rounding (sp.Float ('1e-17') + 2 * sp.I), 2 * sp.I)
		self.assertEqual (fix_rounding (3 + sp.Float ('1e-17') * sp.I), 3)
		self.assertEqual (fix_rounding (mat ((1, sp.Float ('1e-20')), (sp.Float ('-2e-17'), 4))), mat ((1, 0), (0, 4)))
		self.assertEqual (fix_rounding (sp.Rational (1, 3)), sp.Rational (1, 3))
		self.assertEqual (fix_rounding ('text'), 'text')
		self.assertTrue (fix_rounding (sp.sqrt (2)).is_Float)

	def test_value (self):
		self.assertEqual (Value.from_spt (sp.Integer (5)).kind, 'number')
		self.assertEqual (Value.from_spt (1 + sp.I).kind, 'complex')
		self.assertEqual (Value.from_spt (mat ((1,), (2,))).kind, 'vector')
		self.assertEqual (Value.from_spt (mat ((1, 2),)).kind, 'matrix')
		self.assertEqual (Value.from_spt (mat ((1, 2), (3, 4))).kind, 'matrix')
		self.assertEqual (Value.from_spt ('s').kind, 'string')
		self.assertEqual (Value.from_spt (sp.zoo).kind, None)
		self.assertEqual (Value.from_spt (sp.ImmutableMatrix ([])).kind, None)
		self.assertEqual (Value.from_spt (mat ((1,), (2,), (3,))).shape, (3,))
		self.assertEqual (Value.from_spt (mat ((1, 2), (3, 4))).shape, (2, 2))
		self.assertEqual (Value.from_spt (sp.Integer (5)).shape, ())
		self.assertEqual (Value.from_spt (sp.Rational (1, 2)).floats (), 0.5)
		self.assertEqual (Value.from_spt (1 + sp.I).floats (), 1 + 1j)
		self.assertEqual (Value.from_spt (mat ((1,), (2,))).floats (), (1., 2.))
		self.assertEqual (Value.from_spt (mat ((1, 2), (3, 4))).floats (), ((1., 2.), (3., 4.)))
		self.assertRaises (ClassificationMismatch, Value.from_spt (mat ((1,), (sp.I,))).floats)
		self.assertRaises (ClassificationMismatch, Value.from_spt ('s').floats)

	def test_analyze_scenarios (self):
		analyses, scope = analyze_all (['a=2', 'b=3', 'a+b'])

		self.assertEqual (analyses [0].evaluated_tex, '2')
		self.assertTrue (analyses [0].is_assignment)
		self.assertEqual (analyses [2].evaluated_tex, '5')
		self.assertEqual (analyses [2].evaluated_value, Value ('number', sp.Integer (5)))
		self.assertEqual (analyses [2].kind, 'number')
		self.assertIs (analyses [2].is_assignment, False)
		self.assertEqual (analyses [2].last_func, '')
		self.assertEqual (list (scope), ['a', 'b'])
		self.assertEqual (scope ['b'].val, 3)

		analysis, _ = analyze (f'\\det({I22})')

		self.assertEqual (analysis.kind, 'number')
		self.assertEqual (analysis.evaluated_value.val, 1)
		self.assertEqual (analysis.evaluated_tex, '1')
		self.assertEqual (analysis.last_func, 'det')
		self.assertEqual (analysis.last_args, (Value ('matrix', mat ((1, 0), (0, 1))),))

	def test_analyze_scope (self):
		scope = Scope ([('x', Value ('number', sp.Integer (2)))])

		for text in ('1+2', 'x^2', '\\sin(0)', M22, 'x+', 'y', '\\text{hi}'):
			self.assertIs (analyze (text, scope) [1], scope)

		_, scope2 = analyze ('x = x + 1', scope)

		self.assertEqual (scope ['x'].val, 2)
		self.assertEqual (scope2 ['x'].val, 3)
		self.assertIsNot (scope2, scope)

		_, scope3 = analyze ('y = 5', scope2)

		self.assertEqual (list (scope3), ['x', 'y'])
		self.assertEqual (len (scope2), 1)

	def test_analyze_order (self):
		analyses, _ = analyze_all (['b=a', 'a=1', 'b=a'])

		self.assertEqual (analyses [0], Analysis (is_assignment = True))
		self.assertEqual (analyses [2].evaluated_tex, '1')

	def test_analyze_failures (self):
		self.assertEqual (analyze ('1+') [0], Analysis ())
		self.assertEqual (analyze ('\\text{hello}') [0], Analysis ())
		self.assertEqual (analyze ('y = \\det(B)') [0], Analysis (last_func = 'det', is_assignment = True))
		self.assertEqual (analyze ('x + 1') [0], Analysis ())
		self.assertEqual (analyze (r'\begin{bmatrix}1&2\\2&4\end{bmatrix}^{-1}') [0], Analysis ())
		self.assertEqual (analyze (r'\operatorname{inv}(\begin{bmatrix}1&2\\2&4\end{bmatrix})') [0], Analysis (last_func = 'inv'))
		self.assertIs (analyze ('x + 1') [0].is_assignment, False)
		self.assertIs (analyze ('1 + 2') [0].is_assignment, False)
		self.assertIs (analyze ('a = 1') [0].is_assignment, True)
		self.assertEqual (analyze ('9^{9^{9}}') [0].kind, 'number')

	def test_analyze_idempotent (self):
		texts = ['A = ' + M22, 'v = \\begin{bmatrix}1\\\\1\\end{bmatrix}', 'Av', '\\det(A)', '\\operatorname{eigenvalues}(A)', 'x', 'B = A^{-1}', 'AB']

		first, scope1  = analyze_all (texts)
		second, scope2 = analyze_all (texts)

		self.assertEqual (first, second)
		self.assertEqual (dict (scope1), dict (scope2))
		self.assertEqual (first [2].kind, 'vector')
		self.assertEqual (first [2].evaluated_value.val, mat ((3,), (7,)))
		self.assertEqual (first [7].evaluated_value.val, mat ((1, 0), (0, 1)))

	def test_analyze_display (self):
		self.assertEqual (analyze (r'\begin{bmatrix}1\\0.0000000000000001\end{bmatrix}') [0].evaluated_value.floats (), (1., 0.))
		self.assertEqual (analyze (r'\begin{bmatrix}1\\0.0000000000000001\end{bmatrix}') [0].evaluated_tex, r'\begin{bmatrix}1\\0\end{bmatrix}')
		self.assertEqual (analyze (r'\begin{bmatrix}1\\2\end{bmatrix}') [0].kind, 'vector')
		self.assertEqual (analyze (M22) [0].evaluated_tex, r'\begin{bmatrix}1 & 2\\3 & 4\end{bmatrix}')
		self.assertEqual (analyze ('\\sqrt{2}') [0].evaluated_tex, '1.41421')
		self.assertEqual (analyze ('1+i') [0].kind, 'complex')
		self.assertEqual (analyze ('1+i') [0].evaluated_tex, '1 + i')

		set_display_precision (3)

		try:
			self.assertEqual (analyze ('\\sqrt{2}') [0].evaluated_tex, '1.41')
		finally:
			set_display_precision (6)

		analysis, _ = analyze (r'\operatorname{eigenvalues}(\begin{bmatrix}3&0\\0&2\end{bmatrix})')

		self.assertEqual (analysis.kind, 'vector')
		self.assertEqual (analysis.last_func, 'eigenvalues')
		self.assertEqual (analysis.evaluated_tex, '2,\\space 3')

		analysis, _ = analyze (r'\operatorname{eigenvectors}(\begin{bmatrix}2&0\\0&3\end{bmatrix})')

		self.assertEqual (analysis.kind, 'matrix')
		self.assertEqual (analysis.evaluated_tex, r'\begin{bmatrix}1\\0\end{bmatrix},\space \begin{bmatrix}0\\1\end{bmatrix}')

	def test_exprs (self):
		exprs = ExprList ()

		self.assertEqual ([e.id for e in exprs], [0])
		self.assertEqual (exprs.new (), 1)
		self.assertEqual (exprs.new ('comment'), 2)
		self.assertEqual (exprs.new (), 3)

		exprs.input (0, 'a = 2')
		exprs.input (1, 'a + 1')
		exprs.input (2, 'this is a comment')
		exprs.input (3, 'a^2')

		self.assertEqual ([e.evaluated_tex for e in exprs], ['2', '3', '', '4'])
		self.assertEqual (exprs.get (2).kind, None)
		self.assertEqual (exprs.get (2).tex, 'this is a comment')

		exprs.reorder (0, 3)

		self.assertEqual ([e.id for e in exprs], [1, 2, 3, 0])
		self.assertEqual ([e.evaluated_tex for e in exprs], ['3', '', '4', '2']) # not re-evaluated until next input

		exprs.evaluate ()

		self.assertEqual ([e.evaluated_tex for e in exprs], ['', '', '', '2'])

		exprs.delete (0)
		exprs.delete (99)

		self.assertEqual ([e.id for e in exprs], [1, 2, 3])
		self.assertEqual (exprs.new (), 4)
		self.assertIsNone (exprs.get (0))

		exprs.input (99, 'x') # unknown ids ignored
		exprs.insert_tex (1, matrix_tex (2, 2))

		self.assertEqual (exprs.get (1).tex_to_insert, r'\begin{bmatrix}&\\&\end{bmatrix}')

		exprs.input (1, 'b = 1')

		self.assertEqual (exprs.get (1).tex_to_insert, '')

		exprs.option (1, 'color', '#ff0000')
		exprs.option (1, 'visible', False)

		self.assertEqual (exprs.get (1).color, '#ff0000')
		self.assertFalse (exprs.get (1).visible)
		self.assertRaises (ValueError, exprs.option, 1, 'tex', 'x')
		self.assertRaises (ValueError, exprs.option, 1, 'color', 'notacolor')
		self.assertRaises (ValueError, exprs.option, 1, 'color', 5)
		self.assertEqual (exprs.get (1).color, '#ff0000')

		exprs.option (1, 'color', 'tab:blue')

		self.assertEqual (exprs.get (1).color, 'tab:blue')
		self.assertRaises (ValueError, ExprList, [{'id': 0, 'tex': '1', 'color': 'notacolor'}])

	def test_exprs_animation_request (self):
		exprs = ExprList ()

		exprs.request_animation (0)

		self.assertEqual (exprs.get (0).animation_state, AnimationState.REQUESTED)

		exprs.update (0, animation_state = AnimationState.RUNNING)
		exprs.request_animation (0)

		self.assertEqual (exprs.get (0).animation_state, AnimationState.RUNNING)

	def test_exprs_export_import (self):
		exprs = ExprList ()

		exprs.input (0, 'A = ' + M22)
		exprs.input (exprs.new (), '\\det(A)')
		exprs.input (exprs.new ('comment'), 'note')
		exprs.option (1, 'show_minor', False)

		code   = exprs.export ()
		other  = ExprList ()

		other.import_ (code)

		self.assertEqual ([e.id for e in other], [0, 1, 2])
		self.assertEqual ([e.tex for e in other], [e.tex for e in exprs])
		self.assertEqual ([e.evaluated_tex for e in other], [e.evaluated_tex for e in exprs])
		self.assertEqual ([e.evaluated_value for e in other], [e.evaluated_value for e in exprs])
		self.assertEqual ([e.last_args for e in other], [e.last_args for e in exprs])
		self.assertTrue (other.get (2).is_comment)
		self.assertFalse (other.get (1).show_minor)
		self.assertEqual (other.new (), 3)
		self.assertRaises (ValueError, other.import_, 'not base64!')
		self.assertRaises (ValueError, other.import_, 'bm90IGpzb24=') # 'not json'
		self.assertRaises (ValueError, other.import_, 'eyJhIjogMX0=') # '{"a": 1}'

		code = base64.b64encode (json.dumps ([{'id': 7, 'tex': '1', 'color': 'notacolor'}]).encode ()).decode ()

		self.assertRaises (ValueError, other.import_, code)
		self.assertEqual ([e.id for e in other], [0, 1, 2, 3]) # unchanged by failed import
		self.assertEqual (other.new (), 4)

	def test_matrix_tex (self):
		self.assertEqual (matrix_tex (2, 1), r'\begin{bmatrix}\\\end{bmatrix}')
		self.assertEqual (matrix_tex (3, 1), r'\begin{bmatrix}\\\\\end{bmatrix}')
		self.assertEqual (matrix_tex (2, 2), r'\begin{bmatrix}&\\&\end{bmatrix}')
		self.assertEqual (matrix_tex (3, 3), r'\begin{bmatrix}&&\\&&\\&&\end{bmatrix}')
		self.assertTrue (re.match (r'^#[0-9a-f]{6}$', random_color ()))

if __name__ == '__main__':
	unittest.main ()
