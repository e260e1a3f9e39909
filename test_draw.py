#!/usr/bin/env python

# Testing of surface primitives, geometric drawing, animation state machine and graph viewport.

from collections import Counter
from decimal import Decimal
import unittest

import mdraw
import mframes
from mdraw import DrawOptions, format_coord, px_per_unit, shade_color
from mexprs import ExprList
from mframes import AnimationState, Animator, MatrixFrame, ease_in_out_cubic, interpolate
from mgraph import Graph, is_magnitude, wrap_num
from msurface import Surface

M21 = r'\begin{bmatrix}2&1\\0&1\end{bmatrix}'

def surface (width = 200, height = 200, ox = 100, oy = 100):
	s = Surface (width, height)

	s.set_origin (ox, oy)

	return s

def exprs (*texts):
	el = ExprList ()

	el.input (0, texts [0])

	for text in texts [1:]:
		el.input (el.new (), text)

	return el

def clock (end = 2000, step = 100):
	itr = iter (range (0, end + step, step))

	return lambda: next (itr)

class Test (unittest.TestCase):
	def test_helpers (self):
		self.assertEqual (shade_color ('#000000', .5), '#808080')
		self.assertEqual (shade_color ('#000000', .9), '#e6e6e6')
		self.assertEqual (shade_color ('#ff0000', -.5), '#800000')
		self.assertEqual (shade_color ('#ff0000', 0), '#ff0000')
		self.assertEqual (px_per_unit (1, 100), 100.)
		self.assertEqual (px_per_unit (Decimal ('0.5'), 100), 200.)
		self.assertEqual (px_per_unit (Decimal ('0.2'), 150), 750.)
		self.assertEqual (px_per_unit (2, 100), 50.)
		self.assertEqual (format_coord (0), '0')
		self.assertEqual (format_coord (1), '1')
		self.assertEqual (format_coord (Decimal ('0.5')), '0.5')
		self.assertEqual (format_coord (Decimal ('10')), '10')
		self.assertEqual (format_coord (12.5), '12.5')
		self.assertEqual (format_coord (100000), '1e+5')
		self.assertEqual (format_coord (1e-6), '1e-6')
		self.assertEqual (format_coord (Decimal ('0.00001')), '0.00001')

	def test_surface (self):
		s = surface ()

		self.assertEqual (s.bounds (), (-100, 100, -100, 100))
		self.assertEqual (s.bounds ().max (), 100)
		self.assertTrue (s.bounds ().contains (0, 0))
		self.assertTrue (s.bounds ().contains (100, -100))
		self.assertFalse (s.bounds ().contains (101, 0))

		s.line (0, 0, 10, 20, '#ff0000', 3)
		s.text ('a', 5, 5)

		self.assertEqual (s.lines () [0].points, ((100., 100.), (110., 120.)))
		self.assertEqual (s.lines () [0].width, 3)
		self.assertEqual (s.texts () [0].points, ((105., 105.),))

		s.set_background ('white')

		self.assertEqual (s.ops [0].kind, 'rect')
		self.assertEqual (len (s.ops), 3)

		mdraw.draw_text (s, 'out', 500, 0)

		self.assertEqual (len (s.texts ()), 1)

		s.clear ()

		self.assertEqual (s.ops, [])

		s.resize (300, 100)

		self.assertEqual (s.bounds (), (-100, 0, -100, 200))

	def test_png (self):
		s = surface (64, 48, 32, 24)

		mdraw.draw_graph (s, Decimal (1), 100)
		mdraw.draw_vector (s, Decimal (1), 100, 0, 0, .1, .1)
		mdraw.draw_determinant (s, Decimal (1), 100, ((.1, 0.), (0., .1)))

		png = s.to_png ()

		self.assertEqual (png [:8], b'\x89PNG\r\n\x1a\n')
		self.assertTrue (s.to_data_url ().startswith ('data:image/png;base64,'))

	def test_draw_graph (self):
		s = surface ()

		mdraw.draw_graph (s, Decimal (1), 100)

		self.assertEqual (len (s.lines ()), 46)
		self.assertEqual (sorted (op.text for op in s.texts ()), ['-1', '-1', '0', '1', '1'])
		self.assertEqual (s.lines () [-1].color, '#000000')
		self.assertEqual (s.lines () [-1].points, ((100., 300.), (100., -100.)))
		self.assertEqual (s.lines () [-2].points, ((-100., 100.), (300., 100.)))

		s.clear ()
		mdraw.draw_graph (s, Decimal (2), 100)

		self.assertEqual (len (s.lines ()), 38)
		self.assertEqual (sorted (op.text for op in s.texts ()), ['-2', '-2', '0', '2', '2'])

		s.clear ()
		mdraw.draw_graph (s, Decimal ('0.5'), 100, options = DrawOptions (show_minor = False, show_coords = False))

		self.assertEqual (len (s.lines ()), 14)
		self.assertEqual (s.texts (), [])

		s.clear ()
		mdraw.draw_graph (s, Decimal (1), 100, options = DrawOptions (visible = False))

		self.assertEqual (s.ops, [])

	def test_draw_matrix (self):
		s = surface ()

		mdraw.draw_matrix (s, Decimal (1), 100, ((2., 0.), (0., 1.)), DrawOptions (color = '#ff0000', show_minor = False, show_coords = False))

		self.assertEqual (len (s.lines ()), 14)
		self.assertEqual (s.lines () [-2].points, ((-300., 100.), (500., 100.))) # x axis stretched
		self.assertEqual (s.lines () [-1].points, ((100., 300.), (100., -100.)))
		self.assertEqual (s.lines () [-1].color, '#ff0000')

	def test_draw_vector (self):
		s = surface (ox = 0, oy = 0)

		mdraw.draw_vector (s, Decimal (1), 100, 0, 0, 1, 1, DrawOptions (color = '#00ff00'))

		self.assertEqual (len (s.lines ()), 1)
		self.assertEqual (len (s.polygons ()), 1)
		self.assertEqual (s.lines () [0].points, ((0., 0.), (100., -100.)))
		self.assertEqual (s.lines () [0].width, mdraw.VECTOR_WIDTH)
		self.assertEqual (s.polygons () [0].points [1], (100., -100.))
		self.assertEqual (s.polygons () [0].fill, '#00ff00')

		s.clear ()
		mdraw.draw_vector (s, Decimal ('0.5'), 100, 0, 0, 1, 0)

		self.assertEqual (s.lines () [0].points, ((0., 0.), (200., 0.)))

	def test_draw_determinant (self):
		s = surface (ox = 0, oy = 0)

		mdraw.draw_determinant (s, Decimal (1), 100, mdraw.IDENTITY)

		self.assertEqual (s.polygons () [0].points, ((0, 0), (100, 0), (100, -100), (0, -100)))
		self.assertEqual (s.polygons () [0].alpha, mdraw.DET_ALPHA)

		s.clear ()
		mdraw.draw_determinant (s, Decimal (1), 100, ((2., 1.), (0., 1.)))

		self.assertEqual (s.polygons () [0].points, ((0, 0), (200, 0), (300, -100), (100, -100)))

	def test_draw_eigenvectors (self):
		s = surface (400, 400, 0, 0)

		mdraw.draw_eigenvectors (s, Decimal (1), 100, 1, mdraw.IDENTITY)

		ends = [op.points [1] for op in s.lines ()]

		self.assertEqual (len (s.lines ()), 20)
		self.assertEqual (Counter (ends), Counter ((-x, -y) for x, y in ends))
		self.assertIn ((500., 0.), ends)

		s.clear ()
		mdraw.draw_eigenvectors (s, Decimal (1), 100, 1, ((0., 0.), (0., 0.)))

		self.assertEqual (s.ops, [])

	def test_draw_expressions (self):
		el = exprs (r'\begin{bmatrix}1\\1\end{bmatrix}', r'\begin{bmatrix}i\\1\end{bmatrix}', r'\operatorname{eigenvalues}(' + M21 + ')', '5', 'comment')
		s  = surface ()

		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (len (s.lines ()), 1) # only the real 2d vector
		self.assertEqual (len (s.polygons ()), 1)

		el = exprs ('\\det(' + M21 + ')')
		s  = surface ()

		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (len (s.polygons ()), 1)
		self.assertEqual (s.polygons () [0].points, ((100, 100), (300, 100), (400, 0), (200, 0)))

		el.option (0, 'visible', False)
		s.clear ()
		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (s.ops, [])

		el = exprs (M21)
		s  = surface ()

		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (len (s.lines ()), 46)

		el = exprs (r'\operatorname{eigenvectors}(\begin{bmatrix}2&0\\0&3\end{bmatrix})')
		s  = surface (400, 400, 0, 0)

		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (len (s.lines ()), 20)

		el = exprs (r'\operatorname{eigenvectors}(\begin{bmatrix}1&1\\0&1\end{bmatrix})') # single eigenvector
		s  = surface (400, 400, 0, 0)

		self.assertEqual (el.get (0).kind, 'vector')

		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (len (s.lines ()), 10)
		self.assertIn ((500., 0.), [op.points [1] for op in s.lines ()])

	def test_draw_expressions_bad_color (self):
		el = exprs (M21, r'\begin{bmatrix}1\\1\end{bmatrix}')
		s  = surface ()

		el.update (0, color = 'notacolor')
		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (len (s.lines ()), 1) # the vector is still drawn
		self.assertEqual (len (s.polygons ()), 1)
		self.assertEqual (s.to_png () [:4], b'\x89PNG')

		el.update (0, color = 'red')
		s.clear ()
		mdraw.draw_expressions (s, list (el), Decimal (1), 100)

		self.assertEqual (len (s.lines ()), 46 + 1)
		self.assertEqual (s.lines () [45].color, '#ff0000')

	def test_easing (self):
		self.assertEqual (ease_in_out_cubic (0), 0)
		self.assertEqual (ease_in_out_cubic (.5), .5)
		self.assertEqual (ease_in_out_cubic (1), 1)
		self.assertEqual (ease_in_out_cubic (.25), .0625)
		self.assertEqual (interpolate (mdraw.IDENTITY, ((3., 1.), (0., 1.)), 0), mdraw.IDENTITY)
		self.assertEqual (interpolate (mdraw.IDENTITY, ((3., 1.), (0., 1.)), .5), ((2., .5), (0., 1.)))
		self.assertEqual (interpolate (mdraw.IDENTITY, ((3., 1.), (0., 1.)), 2), ((3., 1.), (0., 1.)))

	def test_matrix_frame (self):
		drawn  = []
		before = []
		frame  = MatrixFrame (mdraw.IDENTITY, ((3., 1.), (0., 1.)), 1000, drawn.append, lambda: before.append (1))

		frame (500)
		frame (1500)

		self.assertEqual (drawn, [((2., .5), (0., 1.)), ((3., 1.), (0., 1.))])
		self.assertEqual (frame.last, ((3., 1.), (0., 1.)))
		self.assertEqual (len (before), 2)

		frame = MatrixFrame (mdraw.IDENTITY, ((3., 1.), (0., 1.)), 0, drawn.append)

		frame (0)

		self.assertEqual (frame.last, ((3., 1.), (0., 1.)))

	def test_animator (self):
		el       = exprs ('1')
		animator = Animator (el)
		elapsed  = []

		el.update (0, animation_duration = 300)
		animator.animate (0, elapsed.append)

		self.assertEqual (el.get (0).animation_state, AnimationState.RUNNING)
		self.assertTrue (animator.running)

		animator.animate (0, None) # ignored while running

		self.assertEqual (animator.run (clock (300), sleep = lambda _: None), 4)
		self.assertEqual (elapsed, [0, 100, 200, 300])
		self.assertEqual (el.get (0).animation_state, AnimationState.PAUSED)
		self.assertFalse (animator.running)

		animator.animate (99, elapsed.append) # unknown id

		self.assertFalse (animator.running)

	def test_animator_sleep (self):
		el       = exprs ('1')
		animator = Animator (el)
		sleeps   = []

		el.update (0, animation_duration = 200)
		animator.animate (0, lambda elapsed: None)
		animator.run (clock (200), sleep = sleeps.append, fps = 4)

		self.assertEqual (sleeps, [.25, .25])

		mframes.set_fps (10)

		animator.animate (0, lambda elapsed: None)
		animator.run (clock (200), sleep = sleeps.append)

		self.assertEqual (sleeps, [.25, .25, .1, .1])

		mframes.set_fps (60)

	def test_graph_animation (self):
		el    = exprs (M21)
		graph = Graph (el, 200, 200)

		graph.animate (0)

		self.assertEqual (el.get (0).animation_state, AnimationState.RUNNING)
		self.assertEqual (list (graph.animator.animations), [0])

		frame = graph.animator.animations [0].draw

		graph.animate (0) # re-request while running is ignored

		self.assertIs (graph.animator.animations [0].draw, frame)
		self.assertEqual (graph.animator.run (clock (2000), sleep = lambda _: None), 21)
		self.assertEqual (el.get (0).animation_state, AnimationState.PAUSED)
		self.assertEqual (frame.last, ((2., 1.), (0., 1.)))
		self.assertEqual (len (graph.surface.lines ()), 46 + 46) # base grid and transformed grid

	def test_graph_animation_det (self):
		el    = exprs ('\\det(' + M21 + ')')
		graph = Graph (el, 200, 200)

		graph.animate (0)

		frame = graph.animator.animations [0].draw

		self.assertEqual (frame.initial, mdraw.IDENTITY)

		graph.animator.run (clock (2000), sleep = lambda _: None)

		self.assertEqual (el.get (0).animation_state, AnimationState.PAUSED)
		self.assertEqual (frame.last, ((2., 1.), (0., 1.)))
		self.assertEqual (graph.surface.polygons () [-1].points, ((100, 100), (300, 100), (400, 0), (200, 0)))

	def test_graph_animation_eigenvectors (self):
		el    = exprs (r'\operatorname{eigenvectors}(\begin{bmatrix}2&1\\0&3\end{bmatrix})')
		graph = Graph (el, 200, 200)
		final = el.get (0).evaluated_value.floats ()

		graph.animate (0)

		frame = graph.animator.animations [0].draw

		self.assertEqual (frame.initial, mdraw.IDENTITY)
		self.assertNotEqual (frame.initial, final)

		graph.animator.run (clock (2000), sleep = lambda _: None)

		self.assertEqual (el.get (0).animation_state, AnimationState.PAUSED)

		for row, final_row in zip (frame.last, final):
			for e, f in zip (row, final_row):
				self.assertAlmostEqual (e, f)

		self.assertAlmostEqual (frame.last [1] [1], 2 ** -.5)

	def test_graph_animation_nothing (self):
		el    = exprs ('5')
		graph = Graph (el, 200, 200)

		graph.animate (0)

		self.assertEqual (el.get (0).animation_state, AnimationState.REQUESTED)
		self.assertFalse (graph.animator.running)

	def test_graph_zoom (self):
		graph = Graph (exprs ('1'), 200, 200)
		steps = []

		for _ in range (4):
			graph.zoom (-1000)
			steps.append (graph.step)

		self.assertEqual (steps, [Decimal ('0.5'), Decimal ('0.5'), Decimal ('0.2'), Decimal ('0.1')])
		self.assertEqual (graph.zoom_factor, 10)
		self.assertEqual (graph.origin, (100, 100))

		graph = Graph (exprs ('1'), 200, 200)

		graph.zoom (1000)

		self.assertEqual (graph.step, Decimal (2))
		self.assertEqual (graph.step_px, 100)
		self.assertEqual (graph.zoom_factor, .5)

		graph = Graph (exprs ('1'), 200, 200)

		graph.zoom (-100, 200, 100) # keep point under mouse fixed

		self.assertEqual (graph.step_px, 110)
		self.assertEqual (graph.origin, (90., 100.))

	def test_graph_pan (self):
		graph = Graph (exprs ('1'), 200, 100)

		self.assertEqual (graph.origin, (100, 50))

		graph.pan (10, -20)

		self.assertEqual (graph.origin, (110, 30))

		graph.resize (400, 300)
		graph.center ()

		self.assertEqual (graph.origin, (200, 150))
		self.assertEqual ((graph.width, graph.height), (400, 300))

		graph.redraw ()

		self.assertEqual (graph.surface.origin, (200, 150))
		self.assertEqual (graph.export_png () [:4], b'\x89PNG')
		self.assertEqual (graph.surface.ops [0].kind, 'rect')

	def test_graph_helpers (self):
		self.assertTrue (is_magnitude (Decimal ('0.5'), 5))
		self.assertTrue (is_magnitude (Decimal (20), 2))
		self.assertFalse (is_magnitude (Decimal (1), 5))
		self.assertEqual (wrap_num (200, 100, 200), 100)
		self.assertEqual (wrap_num (300, 100, 250), 150)
		self.assertEqual (wrap_num (0, 100, 200), 100)

if __name__ == '__main__':
	unittest.main ()
