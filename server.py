#!/usr/bin/env python3
# python 3.6+

# Server for expression list session, evaluation, graph rendering and animation frames.

import getopt
import itertools
import json
import os
import re
import sys
import threading
import time
import traceback
import webbrowser

from http.server import HTTPServer, BaseHTTPRequestHandler
from urllib.parse import parse_qs

_VERSION         = '1.0.0'

__OPTS, __ARGV   = getopt.getopt (sys.argv [1:], 'hvnd', ['help', 'version', 'nobrowser', 'debug', 'fps=', 'size='])
__IS_MAIN        = __name__ == '__main__'

_MITRAS_DEBUG    = os.environ.get ('MITRAS_DEBUG')

_DEFAULT_ADDRESS = ('localhost', 9000)
_DEFAULT_SIZE    = (800, 600)
_DEFAULT_FPS     = 10 # frames per second of animations rendered for the client

_HELP            = f'usage: mitras [options] [host:port | host | :port]' '''

  -h, --help               - Show help information
  -v, --version            - Show version string
  -n, --nobrowser          - Don't start system browser to graph image
  -d, --debug              - Dump debug info to server log
  --fps=N                  - Frames per second of rendered animations (default 10)
  --size=WxH               - Size of graph in pixels (default 800x600)
'''.lstrip ()

import mframes
from mexprs import ExprList, random_color
from mgraph import Graph

def _opt (short, long):
	for opt, val in __OPTS:
		if opt in (short, long):
			return val or True

	return None

def _size ():
	size = _opt (None, '--size')

	if not size:
		return _DEFAULT_SIZE

	m = re.match (r'^(\d+)[xX](\d+)$', size)

	if not m:
		raise ValueError (f'invalid size {size!r}, expecting WxH')

	return int (m.group (1)), int (m.group (2))

_EXPRS = ExprList () # This is individual session STATE! Threading can corrupt this! It is GLOBAL to survive multiple Handlers.
_GRAPH = Graph (_EXPRS, *_size ())
_FPS   = int (_opt (None, '--fps') or _DEFAULT_FPS)

#...............................................................................................
def _expr2json (expr):
	return {
		'id'                : expr.id,
		'tex'               : expr.tex,
		'tex_to_insert'     : expr.tex_to_insert,
		'is_comment'        : expr.is_comment,
		'evaluated_tex'     : expr.evaluated_tex,
		'kind'              : expr.kind,
		'last_func'         : expr.last_func,
		'is_assignment'     : expr.is_assignment,
		'color'             : expr.color,
		'visible'           : expr.visible,
		'show_minor'        : expr.show_minor,
		'show_coords'       : expr.show_coords,
		'animation_duration': expr.animation_duration,
		'animation_state'   : expr.animation_state.name,
	}

def _exprs2json ():
	return {'exprs': [_expr2json (e) for e in _EXPRS]}

def _texts (request):
	texts = request.get ('text', [])

	return [texts] if isinstance (texts, str) else texts

def _bool (s):
	return s.lower () not in {'', '0', 'false', 'no', 'off'}

_OPTION_TYPES = {'color': str, 'visible': _bool, 'show_minor': _bool, 'show_coords': _bool, 'animation_duration': int}

#...............................................................................................
class Handler (BaseHTTPRequestHandler):
	def evaluate (self, request): # replace session with list of texts
		_EXPRS.load ([{'id': i, 'tex': t, 'color': random_color ()} for i, t in enumerate (_texts (request))])

		return _exprs2json ()

	def input (self, request):
		id = int (request ['id'])

		if 'text' in request:
			_EXPRS.input (id, request ['text'])

		if 'option' in request:
			name = request ['option']

			if name not in _OPTION_TYPES:
				raise ValueError (f'invalid expression option {name!r}')

			_EXPRS.option (id, name, _OPTION_TYPES [name] (request ['value']))

		return _exprs2json ()

	def new (self, request):
		id = _EXPRS.new (request.get ('type', 'math'))

		return {'id': id, **_exprs2json ()}

	def delete (self, request):
		_EXPRS.delete (int (request ['id']))

		return _exprs2json ()

	def render (self, request):
		if 'width' in request and 'height' in request:
			_GRAPH.resize (int (request ['width']), int (request ['height']))

		if 'center' in request:
			_GRAPH.center ()

		if 'pan' in request:
			dx, dy = (float (v) for v in request ['pan'].split (','))

			_GRAPH.pan (dx, dy)

		if 'zoom' in request:
			_GRAPH.zoom (float (request ['zoom']))

		return {'png': _GRAPH.export_data_url (), 'step': str (_GRAPH.step), 'step_px': _GRAPH.step_px}

	def animate (self, request):
		fps    = int (request.get ('fps', _FPS))
		frames = []
		clock  = itertools.count (0, 1000 / fps)

		_GRAPH.animate (int (request ['id']))
		_GRAPH.animator.run (clock = lambda: next (clock), sleep = lambda _: frames.append (_GRAPH.surface.to_data_url ()), fps = fps)

		frames.append (_GRAPH.surface.to_data_url ()) # last frame at final matrix

		expr = _EXPRS.get (int (request ['id']))

		if expr is not None and expr.animation_state == mframes.AnimationState.REQUESTED: # nothing animatable
			_EXPRS.update (expr.id, animation_state = mframes.AnimationState.PAUSED)

		if _MITRAS_DEBUG:
			print ('frames:', len (frames), file = sys.stderr)

		return {'frames': frames, **_exprs2json ()}

	def export (self, request):
		return {'code': _EXPRS.export ()}

	def import_ (self, request):
		_EXPRS.import_ (request ['code'])

		return _exprs2json ()

	_MODES = {
		'evaluate': evaluate,
		'input'   : input,
		'new'     : new,
		'delete'  : delete,
		'render'  : render,
		'animate' : animate,
		'export'  : export,
		'import'  : import_,
	}

	def do_GET (self):
		if self.path not in {'/', '/graph.png'}:
			self.send_error (404, f'Invalid path {self.path!r}')

		else:
			data = _GRAPH.export_png ()

			self.send_response (200)
			self.send_header ('Content-type', 'image/png')
			self.send_header ('Cache-Control', 'no-store')
			self.end_headers ()
			self.wfile.write (data)

	def do_POST (self):
		request = parse_qs (self.rfile.read (int (self.headers ['Content-Length'])).decode ('utf8'), keep_blank_values = True)

		for key, val in list (request.items ()):
			if isinstance (val, list) and len (val) == 1 and key != 'text':
				request [key] = val [0]

		if isinstance (request.get ('text'), list) and request.get ('mode') != 'evaluate':
			request ['text'] = request ['text'] [0]

		try:
			mode = self._MODES.get (request.get ('mode'))

			if mode is None:
				raise ValueError (f'invalid mode {request.get ("mode")!r}')

			response = mode (self, request)

		except Exception:
			etype, exc, tb = sys.exc_info ()

			if exc.args and isinstance (exc.args [0], str):
				exc = etype (exc.args [0].replace ('\n', ' ').strip (), *exc.args [1:]).with_traceback (tb) # reformat text to remove newlines

			response = {'err': ''.join (traceback.format_exception (etype, exc, tb)).strip ().split ('\n')}

		response ['mode'] = request.get ('mode')

		self.send_response (200)
		self.send_header ('Content-type', 'application/json')
		self.send_header ('Cache-Control', 'no-store')
		self.end_headers ()
		self.wfile.write (json.dumps (response).encode ('utf8'))

#...............................................................................................
def start_server (logging = True):
	if not logging:
		Handler.log_message = lambda *args, **kwargs: None

	if not __ARGV:
		host, port = _DEFAULT_ADDRESS
	else:
		host, port = (re.split (r'(?<=\]):' if __ARGV [0].startswith ('[') else ':', __ARGV [0]) + [_DEFAULT_ADDRESS [1]]) [:2]
		host, port = host.strip ('[]') or _DEFAULT_ADDRESS [0], int (port or _DEFAULT_ADDRESS [1])

	mframes.set_fps (_FPS)

	try:
		httpd  = HTTPServer ((host, port), Handler)
		thread = threading.Thread (target = httpd.serve_forever, daemon = True)

		thread.start ()

		return httpd

	except OSError as e:
		if e.errno != 98:
			raise

		print (f'Port {port} seems to be in use, try specifying different port as a command line parameter, e.g. localhost:9001')

		sys.exit (-1)

_MONTH_NAME = (None, 'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

def serve ():
	def log_message (msg):
		y, m, d, hh, mm, ss, _, _, _ = time.localtime (time.time ())

		sys.stderr.write (f'{httpd.server_address [0]} - - ' \
				f'[{"%02d/%3s/%04d %02d:%02d:%02d" % (d, _MONTH_NAME [m], y, hh, mm, ss)}] {msg}\n')

	# start here
	httpd = start_server ()
	url   = f'http://{httpd.server_address [0] if httpd.server_address [0] != "0.0.0.0" else "127.0.0.1"}:{httpd.server_address [1]}/'

	if not _opt ('-n', '--nobrowser'):
		webbrowser.open (url)

	print (f'Mitras v{_VERSION} server running. POST requests with a "mode" of {", ".join (Handler._MODES)} to the address below.\n')

	log_message (f'Serving at {url}')

	try:
		while 1:
			time.sleep (0.5) # thread.join () doesn't catch KeyboardInterupt on Windows

	except KeyboardInterrupt:
		sys.exit (0)

def main ():
	global _MITRAS_DEBUG

	if _opt ('-h', '--help'):
		print (_HELP)
		sys.exit (0)

	if _opt ('-v', '--version'):
		print (_VERSION)
		sys.exit (0)

	if _opt ('-d', '--debug'):
		_MITRAS_DEBUG = os.environ ['MITRAS_DEBUG'] = '1'

	serve ()

if __IS_MAIN:
	main ()
