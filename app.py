"""Flask static file server for the admin UI.

Serves every file under a single root directory. Directories are answered
with their `index.html` when one exists, or with a plain listing otherwise.
Any path that goes through an ignored directory (`node_modules`) is a 404.

Normally started through serve.py; see `create_app` to embed it elsewhere.
"""
import os
from urllib.parse import quote

from flask import Flask, abort, render_template_string, send_from_directory
from werkzeug.security import safe_join


LISTING_TEMPLATE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>Index of /{{ path }}</title>
</head>
<body>
  <h1>Index of /{{ path }}</h1>
  <ul>
    {% if parent is not none %}<li><a href="{{ parent }}">../</a></li>{% endif %}
    {% for name, href in entries %}
    <li><a href="{{ href }}">{{ name }}</a></li>
    {% endfor %}
  </ul>
</body>
</html>
"""


def is_ignored(path, ignore_patterns):
    """Return True if any segment of `path` is one of the ignored names.

    Names are compared case-insensitively, since the default macOS and
    Windows filesystems resolve `NODE_MODULES` to `node_modules`.
    """
    ignored = {p.casefold() for p in ignore_patterns}
    segments = path.replace('\\', '/').split('/')
    return any(seg.casefold() in ignored for seg in segments if seg)


def list_directory(directory, rel_path, ignore_patterns):
    """Build (name, href) pairs for a directory, folders first."""
    dirs, files = [], []
    for name in sorted(os.listdir(directory)):
        if is_ignored(name, ignore_patterns):
            continue
        full = os.path.join(directory, name)
        href = quote('/' + '/'.join(p for p in (rel_path, name) if p))
        if os.path.isdir(full):
            dirs.append((name + '/', href + '/'))
        else:
            files.append((name, href))
    return dirs + files


def create_app(root_directory, ignore_patterns):
    app = Flask(__name__, static_folder=None)
    app.config['ROOT_DIRECTORY'] = root_directory
    app.config['IGNORE_PATTERNS'] = frozenset(ignore_patterns)

    @app.route('/', defaults={'filename': ''})
    @app.route('/<path:filename>')
    def serve_path(filename):
        root = app.config['ROOT_DIRECTORY']
        ignore = app.config['IGNORE_PATTERNS']
        if is_ignored(filename, ignore):
            abort(404)

        rel_path = filename.strip('/')
        target = safe_join(root, rel_path) if rel_path else root
        if target is None:
            abort(404)

        if os.path.isdir(target):
            if os.path.isfile(os.path.join(target, 'index.html')):
                return send_from_directory(target, 'index.html')
            parent = None
            if rel_path:
                parent = '/' + rel_path.rpartition('/')[0]
                if parent != '/':
                    parent += '/'
                parent = quote(parent)
            return render_template_string(
                LISTING_TEMPLATE,
                path=rel_path,
                parent=parent,
                entries=list_directory(target, rel_path, ignore),
            )

        if os.path.isfile(target):
            return send_from_directory(root, rel_path)
        abort(404)

    return app
