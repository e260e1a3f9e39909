# Draw coordinate grid and geometric interpretation of expression values onto a Surface.

from collections import namedtuple
from decimal import Decimal
import math
import os
import sys

from matplotlib.colors import to_hex, to_rgb

import mkernel
from mframes import AnimationState, MatrixFrame

PX_PER_UNSCALED_STEP = 100 # px per step before zooming in / out
COORD_OFFSET         = PX_PER_UNSCALED_STEP // 6 # px offset of coordinate labels from axis
VECTOR_WIDTH         = 3
HEAD_LEN             = 15 # px
HEAD_SQUISH          = 0.9 # rad
DET_ALPHA            = 0.4

IDENTITY             = ((1., 0.), (0., 1.))

DrawOptions          = namedtuple ('DrawOptions', 'color show_coords show_minor visible')
DrawOptions.__new__.__defaults__ = ('#000000', True, True, True)

def _identity (rows, cols):
	return tuple (tuple (1. if r == c else 0. for c in range (cols)) for r in range (rows))

def _options (expr):
	return DrawOptions (to_hex (expr.color), expr.show_coords, expr.show_minor, expr.visible) # raises ValueError for unknown color

def shade_color (color, light):
	"""Shade color ('#rrggbb' or anything matplotlib understands) toward black
	for light < 0 or toward white for light > 0, light in [-1, 1]."""

	if light < 0:
		rgb = tuple (c * (1 + light) for c in to_rgb (color))
	else:
		rgb = tuple ((1 - light) * c + light for c in to_rgb (color))

	return to_hex (rgb)

def px_per_unit (step, step_px):
	return float (Decimal (str (step_px)) / Decimal (str (step)))

def format_coord (value): # scientific notation outside [1e-5, 1e5)
	value = Decimal (str (value)).normalize ()

	if value and (abs (value) >= Decimal ('1e5') or abs (value) < Decimal ('1e-5')):
		return format (value, 'e')

	return format (value, 'f')

def _mul (transform, x, y):
	return (transform [0] [0] * x + transform [0] [1] * y, transform [1] [0] * x + transform [1] [1] * y)

#...............................................................................................
def set_origin (surface, x, y):
	surface.set_origin (x, y)

def clear (surface):
	surface.clear ()

def set_background (surface, color = 'white'):
	surface.set_background (color)

def draw_text (surface, text, x, y, color = 'black', bgcolor = 'white', align = 'center'):
	if surface.bounds ().contains (x, y):
		surface.text (text, x, y, color, bgcolor, align)

def draw_graph (surface, step, step_px, transform = IDENTITY, options = DrawOptions ()):
	"""Draw grid lines and axes with the linear transform applied, out to the
	visible bound of the surface. step is the coordinate value between major
	lines which are step_px pixels apart."""

	if not options.visible:
		return

	step         = Decimal (str (step))
	sub_steps    = 4 if step % 2 == 0 else 5
	px_per_sub   = step_px // sub_steps
	max_steps    = int (surface.bounds ().max () // step_px) + 1
	max_coord    = max_steps * step_px
	axis_color   = options.color
	main_color   = shade_color (options.color, 0.5)
	minor_color  = shade_color (options.color, 0.9)

	def horizontal (y, color):
		x0, y0 = _mul (transform, -max_coord, y)
		x1, y1 = _mul (transform, max_coord, y)

		surface.line (x0, -y0, x1, -y1, color)

	def vertical (x, color):
		x0, y0 = _mul (transform, x, -max_coord)
		x1, y1 = _mul (transform, x, max_coord)

		surface.line (x0, -y0, x1, -y1, color)

	def text (txt, x, y, align):
		x, y = _mul (transform, x, y)

		draw_text (surface, txt, x, -y, options.color, 'white', align)

	for i in range (max_steps + 1):
		xy = i * step_px

		if options.show_minor and i < max_steps:
			for j in range (1, sub_steps):
				px = j * px_per_sub

				horizontal (xy + px, minor_color)
				horizontal (-xy - px, minor_color)
				vertical (xy + px, minor_color)
				vertical (-xy - px, minor_color)

		horizontal (xy, main_color)
		horizontal (-xy, main_color)
		vertical (xy, main_color)
		vertical (-xy, main_color)

		if options.show_coords and i:
			coord = format_coord (step * i)

			text (f'-{coord}', -COORD_OFFSET, -xy, 'right')
			text (coord, -COORD_OFFSET, xy, 'right')
			text (coord, xy, -COORD_OFFSET, 'center')
			text (f'-{coord}', -xy, -COORD_OFFSET, 'center')

	if options.show_coords:
		text ('0', -COORD_OFFSET, -COORD_OFFSET, 'right')

	horizontal (0, axis_color) # axes last so they are on top
	vertical (0, axis_color)

def draw_vector (surface, step, step_px, vx0, vy0, vx1, vy1, options = DrawOptions ()):
	"""Arrow from (vx0, vy0) to (vx1, vy1) in coordinate units."""

	if not options.visible:
		return

	unit_px        = px_per_unit (step, step_px)
	x0, y0, x1, y1 = (v * unit_px for v in (vx0, -vy0, vx1, -vy1))
	dx, dy         = x1 - x0, y1 - y0
	length         = math.sqrt (dx * dx + dy * dy)
	head_len       = length * 0.75 if length < 20 else HEAD_LEN
	angle          = math.atan2 (dy, dx)
	right          = (x1 - head_len * math.cos (angle + HEAD_SQUISH - math.pi / 6), y1 - head_len * math.sin (angle + HEAD_SQUISH - math.pi / 6))
	left           = (x1 - head_len * math.cos (angle - HEAD_SQUISH + math.pi / 6), y1 - head_len * math.sin (angle - HEAD_SQUISH + math.pi / 6))

	surface.line (x0, y0, x1, y1, options.color, VECTOR_WIDTH)
	surface.polygon ((left, (x1, y1), right), options.color, 1, fill = options.color)

def draw_matrix (surface, step, step_px, matrix, options = DrawOptions ()):
	draw_graph (surface, step, step_px, matrix, options)

def draw_determinant (surface, step, step_px, matrix, options = DrawOptions ()):
	"""Unit square transformed by matrix, its signed area is the determinant."""

	if not options.visible:
		return

	unit_px = px_per_unit (step, step_px)
	corners = [_mul (matrix, x, y) for x, y in ((1, 0), (1, 1), (0, 1))]
	points  = [(0, 0)] + [(x * unit_px, -y * unit_px) for x, y in corners]

	surface.polygon (points, options.color, 1, fill = options.color, alpha = DET_ALPHA)

def draw_eigenvectors (surface, step, step_px, zoom_factor, eigenvectors, options = DrawOptions ()):
	"""Rays at integer multiples of the first two eigenvector columns in both
	directions out to the visible bound."""

	if not options.visible:
		return

	max_coord = (int (surface.bounds ().max () // step_px) + 1) * float (step)

	for c in range (min (2, len (eigenvectors [0]))):
		vector = (eigenvectors [0] [c], eigenvectors [1] [c])
		vmax   = max (abs (v) for v in vector)

		if not vmax:
			continue

		count  = max_coord / vmax * zoom_factor + 1
		x, y   = (v / zoom_factor for v in vector)
		i      = 1

		while i < count:
			draw_vector (surface, step, step_px, 0, 0, x * i, y * i, options)
			draw_vector (surface, step, step_px, 0, 0, -x * i, -y * i, options)

			i += 1

#...............................................................................................
def matrix_frame (surface, exprs, step, step_px, zoom_factor, initial, final, duration, options, draw):
	"""Animation frame callable for a matrix-like expression, each frame
	redraws the base grid and all expressions not being animated beneath the
	interpolated matrix drawn by draw (matrix, options)."""

	def before ():
		clear (surface)
		draw_graph (surface, step, step_px)
		draw_expressions (surface, exprs, step, step_px, zoom_factor)

	return MatrixFrame (initial, final, duration, lambda mat: draw (mat, options), before)

def _draw_expr (surface, exprs, expr, step, step_px, zoom_factor, animate):
	value   = expr.evaluated_value
	options = _options (expr)
	anim    = expr.animation_state == AnimationState.REQUESTED and animate is not None
	static  = expr.animation_state == AnimationState.PAUSED

	def start (initial, final, draw):
		animate (expr.id, matrix_frame (surface, exprs, step, step_px, zoom_factor, initial, final, expr.animation_duration, options, draw))

	if expr.last_func == 'eigenvectors' and value.kind in ('matrix', 'vector'):
		if value.val.rows < 2:
			return

		final = value.floats ()

		if value.kind == 'vector': # single eigenvector of a defective matrix
			final = tuple ((v,) for v in final)

		draw = lambda mat, opts: draw_eigenvectors (surface, step, step_px, zoom_factor, mat, opts)

		if anim:
			start (_identity (len (final), len (final [0])), final, draw)
		elif static:
			draw (final, options)

	elif value.kind == 'matrix':
		if mkernel.is_matrix (value.val, 2):
			draw = lambda mat, opts: draw_matrix (surface, step, step_px, mat, opts)

			if anim:
				start (IDENTITY, value.floats (), draw)
			elif static:
				draw (value.floats (), options)

	elif value.kind == 'vector':
		if mkernel.is_vector (value.val, 2) and expr.last_func != 'eigenvalues':
			x, y = value.floats ()

			draw_vector (surface, step, step_px, 0, 0, x, y, options)

	elif value.kind == 'number':
		if expr.last_func == 'det' and expr.last_args:
			matrix = expr.last_args [0]

			if not mkernel.is_matrix (matrix.val, 2):
				return

			draw = lambda mat, opts: draw_determinant (surface, step, step_px, mat, opts)

			if anim:
				start (IDENTITY, matrix.floats (), draw)
			elif static:
				draw (matrix.floats (), options)

def draw_expressions (surface, exprs, step, step_px, zoom_factor = 1, animate = None):
	"""Draw each expression record according to the kind of its value and the
	function which produced it. Records requesting animation are handed to
	animate (id, draw_frame) if it is given, running ones are left to their
	animation frames."""

	for expr in exprs:
		if expr.is_comment or expr.evaluated_value is None or not expr.visible:
			continue

		try:
			_draw_expr (surface, exprs, expr, step, step_px, zoom_factor, animate)
		except mkernel.ClassificationMismatch: # complex or otherwise undrawable values
			pass
		except ValueError as e: # unknown color on this record
			if os.environ.get ('MITRAS_DEBUG'):
				print ('draw error:', expr.id, repr (e), file = sys.stderr)
