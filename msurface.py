# Two dimensional drawing surface recording primitives in pixel coordinates, rendered to PNG using matplotlib.

import base64
from collections import namedtuple
from io import BytesIO

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Polygon, Rectangle

_DPI = 72 # one point is one pixel

# kind   - 'line', 'polygon', 'text' or 'rect'
# points - ((x0, y0), (x1, y1), ...) in device pixels, y down
Op = namedtuple ('Op', 'kind points color width fill alpha text align bgcolor')

def _op (kind, points, color = '#000000', width = 1, fill = None, alpha = 1., text = None, align = None, bgcolor = None):
	return Op (kind, tuple ((float (x), float (y)) for x, y in points), color, width, fill, alpha, text, align, bgcolor)

class Bounds (namedtuple ('Bounds', 'top bottom left right')):
	def max (self):
		return max (abs (v) for v in self)

	def contains (self, x, y):
		return self.left <= x <= self.right and self.top <= y <= self.bottom

#...............................................................................................
class Surface:
	"""Canvas-like surface. Drawing calls take coordinates relative to the
	current origin (set_origin), positive y down. Primitives are kept in
	device pixels in ops and turned into an image only on request."""

	def __init__ (self, width = 800, height = 600):
		self.width  = width
		self.height = height
		self.ox     = 0
		self.oy     = 0
		self.ops    = []

	def resize (self, width, height):
		self.width, self.height = width, height

	def set_origin (self, x, y):
		self.ox, self.oy = x, y

	@property
	def origin (self):
		return (self.ox, self.oy)

	def bounds (self): # visible region relative to origin
		return Bounds (-self.oy, self.height - self.oy, -self.ox, self.width - self.ox)

	def _dev (self, points):
		return tuple ((x + self.ox, y + self.oy) for x, y in points)

	def clear (self): # whole visible region since the transform is a translation
		del self.ops [:]

	def set_background (self, color = 'white'): # painted behind current content
		self.ops.insert (0, _op ('rect', ((0, 0), (self.width, self.height)), color = color, fill = color))

	def line (self, x0, y0, x1, y1, color = '#000000', width = 1):
		self.ops.append (_op ('line', self._dev (((x0, y0), (x1, y1))), color, width))

	def polygon (self, points, color = '#000000', width = 1, fill = None, alpha = 1.):
		self.ops.append (_op ('polygon', self._dev (points), color, width, fill, alpha))

	def text (self, text, x, y, color = 'black', bgcolor = 'white', align = 'center'):
		self.ops.append (_op ('text', self._dev (((x, y),)), color, text = text, align = align, bgcolor = bgcolor))

	def lines (self): # convenience for inspection
		return [op for op in self.ops if op.kind == 'line']

	def polygons (self):
		return [op for op in self.ops if op.kind == 'polygon']

	def texts (self):
		return [op for op in self.ops if op.kind == 'text']

	#...............................................................................................
	def figure (self):
		fig = Figure (figsize = (self.width / _DPI, self.height / _DPI), dpi = _DPI)
		ax  = fig.add_axes ([0, 0, 1, 1])

		FigureCanvasAgg (fig)

		ax.set_xlim (0, self.width)
		ax.set_ylim (self.height, 0)
		ax.set_axis_off ()

		for op in self.ops:
			if op.kind == 'rect':
				(x0, y0), (x1, y1) = op.points

				ax.add_patch (Rectangle ((x0, y0), x1 - x0, y1 - y0, facecolor = op.fill, edgecolor = 'none', zorder = 0))

			elif op.kind == 'line':
				xs, ys = zip (*op.points)

				ax.add_line (Line2D (xs, ys, color = op.color, linewidth = op.width, solid_capstyle = 'butt'))

			elif op.kind == 'polygon':
				if op.fill is not None:
					ax.add_patch (Polygon (op.points, closed = True, facecolor = op.fill, edgecolor = 'none', alpha = op.alpha))

				ax.add_patch (Polygon (op.points, closed = True, fill = False, edgecolor = op.color, linewidth = op.width))

			elif op.kind == 'text':
				(x, y), = op.points

				ax.text (x, y, op.text, color = op.color, fontsize = 16, ha = op.align, va = 'center',
						bbox = dict (facecolor = op.bgcolor, edgecolor = 'none', pad = 2))

		return fig

	def to_png (self, transparent = True):
		data = BytesIO ()

		self.figure ().savefig (data, format = 'png', dpi = _DPI, facecolor = 'none', edgecolor = 'none', transparent = transparent)

		return data.getvalue ()

	def to_base64 (self, transparent = True):
		return base64.b64encode (self.to_png (transparent)).decode ()

	def to_data_url (self, transparent = True):
		return f'data:image/png;base64,{self.to_base64 (transparent)}'
