"""
Bottle app served through the App Service virtualenv proxy.
"""
import bottle
from bottle import route


@route('/')
def index():
    return "Hello, Python!"


app = bottle.default_app()

if __name__ == '__main__':
    bottle.run(app, host='localhost', port=5000)
