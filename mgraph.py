# Graph viewport: origin, pan, zoom with "nice" steps, redraw of expressions and PNG export.

from decimal import Decimal

import mdraw
from mframes import Animator
from msurface import Surface

MIN_STEP_PX = 100 # smaller than this and new substeps are drawn

def is_magnitude (x, y): # x == y * 10^n for integer n
	n = (Decimal (str (x)) / Decimal (str (y))).log10 ()

	return n == n.to_integral_value ()

def wrap_num (x, min, max):
	d = max - min

	return ((x - min) % d + d) % d + min

class Graph:
	def __init__ (self, exprs, width = 800, height = 600, surface = None):
		self.exprs       = exprs
		self.surface     = surface or Surface (width, height)
		self.step        = Decimal (1)
		self.step_px     = MIN_STEP_PX
		self.zoom_factor = 1.
		self.origin      = (width / 2, height / 2)
		self.animator    = Animator (exprs)

	@property
	def width (self):
		return self.surface.width

	@property
	def height (self):
		return self.surface.height

	def resize (self, width, height):
		self.surface.resize (width, height)

	def center (self):
		self.origin = (self.width / 2, self.height / 2)

	def pan (self, dx, dy):
		self.origin = (self.origin [0] + dx, self.origin [1] + dy)

	def zoom (self, delta_y, mouse_x = None, mouse_y = None):
		"""Zoom by wheel delta_y (negative zooms in) keeping the point under
		the mouse fixed, the surface center if no mouse position given. The
		step changes by a factor of 2 or 5/2 so that it stays a "nice" number
		(1 -> 0.5 -> 0.2 -> 0.1)."""

		mouse_x      = self.width / 2 if mouse_x is None else mouse_x
		mouse_y      = self.height / 2 if mouse_y is None else mouse_y
		scroll       = -delta_y * 0.1
		zooming_in   = scroll > 0
		next_step_px = self.step_px + scroll
		next_step    = self.step

		if zooming_in:
			factor = Decimal ('2.5') if is_magnitude (self.step, 5) else Decimal (2)
		else:
			factor = Decimal ('2.5') if is_magnitude (self.step, 2) else Decimal (2)

		max_step_px = MIN_STEP_PX * float (factor)

		if zooming_in and next_step_px >= max_step_px:
			next_step_px      = wrap_num (next_step_px, MIN_STEP_PX, max_step_px)
			next_step         = self.step / factor
			self.zoom_factor *= float (factor)

		elif not zooming_in and next_step_px < MIN_STEP_PX:
			next_step_px      = wrap_num (next_step_px, MIN_STEP_PX, max_step_px)
			next_step         = self.step * factor
			self.zoom_factor /= float (factor)

		unit_px       = mdraw.px_per_unit (self.step, self.step_px)
		next_unit_px  = mdraw.px_per_unit (next_step, next_step_px)
		delta_unit_px = next_unit_px - unit_px
		ox, oy        = self.origin

		self.origin   = (ox - (mouse_x - ox) / unit_px * delta_unit_px, oy - (mouse_y - oy) / unit_px * delta_unit_px)
		self.step     = next_step
		self.step_px  = next_step_px

	def redraw (self):
		mdraw.clear (self.surface)
		mdraw.set_origin (self.surface, *self.origin)
		mdraw.draw_graph (self.surface, self.step, self.step_px)
		mdraw.draw_expressions (self.surface, list (self.exprs), self.step, self.step_px, self.zoom_factor, self.animator.animate)

		return self.surface

	def animate (self, id): # request animation and pick it up with a redraw
		self.exprs.request_animation (id)

		return self.redraw ()

	def tick (self, now):
		mdraw.set_origin (self.surface, *self.origin)

		return self.animator.tick (now)

	def export_png (self):
		self.redraw ()
		mdraw.set_background (self.surface, 'white')

		return self.surface.to_png (transparent = False)

	def export_data_url (self):
		self.redraw ()
		mdraw.set_background (self.surface, 'white')

		return self.surface.to_data_url (transparent = False)
