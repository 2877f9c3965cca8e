from flask import Flask

import linelog
from linelog.config import configure_from_env
from linelog.handler import get_logger

configure_from_env()

app = Flask(__name__)
app.wsgi_app = linelog.log_requests(app.wsgi_app)
logger = get_logger(__name__)

@app.route('/')
def index():
    logger.info("Index page accessed")
    return {'message': 'Hello from linelog!'}

@app.route('/slow')
def slow():
    record = linelog.new_record('slow_work')
    total = sum(range(1_000_000))
    record.log('summed %d numbers to %d', 1_000_000, total)
    return {'total': total}

@app.route('/health')
def health():
    return {'status': 'healthy'}, 200

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=8000)
