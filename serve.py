"""Serve the admin UI as static files.

Run from the project root:
  python serve.py

Serves the `admin/` folder next to this file at http://localhost:1444 and
opens it in the default browser. Anything under `node_modules` is not served.
"""
import os
import threading
import webbrowser

from werkzeug.serving import make_server

from app import create_app

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PORT = 1444
IGNORE_PATTERNS = {'node_modules'}


def build_config(base_dir=None):
    if base_dir is None:
        base_dir = BASE_DIR
    return {
        'root_directory': os.path.join(base_dir, 'admin'),
        'port': PORT,
        'open_browser': True,
        'ignore_patterns': frozenset(IGNORE_PATTERNS),
    }


def create_server(config, host='0.0.0.0'):
    """Bind a threaded WSGI server for `config`.

    Binding happens here, so an occupied port fails before anything else
    (werkzeug reports it and exits with status 1).
    """
    app = create_app(config['root_directory'], config['ignore_patterns'])
    return make_server(host, config['port'], app, threaded=True)


def serve(config):
    server = create_server(config)
    url = f"http://localhost:{config['port']}"
    print(f"Serving {config['root_directory']} at {url}")
    timer = None
    if config['open_browser']:
        timer = threading.Timer(0.8, webbrowser.open, args=(url,))
        timer.start()
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print('\nServer stopped')
    finally:
        if timer is not None:
            timer.cancel()
        server.server_close()


def main():
    serve(build_config())


if __name__ == '__main__':
    main()
