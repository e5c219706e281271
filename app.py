from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import logging

from product_metadata import __version__
from product_metadata.config import Config
from product_metadata.errors import FetchFailure, FetchTimeout, InvalidInput
from product_metadata.service import MetadataExtractor

app = Flask(__name__)
# Browsers cannot read third-party shop pages themselves, so any origin may call us
CORS(
    app,
    resources={r"/*": {"origins": "*"}},
    methods=['POST', 'OPTIONS'],
    allow_headers=['Content-Type'],
    send_wildcard=True,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

extractor = MetadataExtractor()


def error_response(message, status):
    return jsonify({'success': False, 'error': message}), status


@app.route('/api/extract-metadata', methods=['POST'])
@app.route('/', methods=['POST'])
def extract_metadata():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response('Invalid request. URL is required.', 400)

    url = data.get('url')
    if not url or not isinstance(url, str):
        return error_response('Invalid request. URL is required.', 400)

    logger.info(f"Extracting metadata from: {url}")

    try:
        result = extractor.fetch_and_extract(url)
    except InvalidInput as e:
        logger.warning(f"Rejected URL {url!r}: {e}")
        return error_response(e.message, 400)
    except FetchTimeout as e:
        logger.error(f"Timeout error for {url}: {e}")
        return error_response(e.message, 408)
    except FetchFailure as e:
        logger.error(f"Fetch error for {url}: {e}")
        return error_response(e.message, 500)
    except Exception:
        logger.exception(f"Metadata extraction error for {url}")
        return error_response('Failed to extract metadata from the URL.', 500)

    title = result.title[:50] + '...' if result.title and len(result.title) > 50 else result.title
    logger.info(f"Extracted: {title or 'No title'}")
    return jsonify(result.to_dict())


@app.route('/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'healthy', 'message': 'API is running'})


@app.route('/', methods=['GET'])
def home():
    return jsonify({
        'name': 'Product Metadata Extraction API',
        'version': __version__,
        'endpoints': {
            '/api/extract-metadata': 'POST - Extract title, image, price and description from a product URL',
            '/health': 'GET - Health check'
        },
        'settings': Config.to_dict(),
        'note': 'Pages that render their details with JavaScript may return few or no fields.'
    })


@app.errorhandler(HTTPException)
def handle_http_error(e):
    if e.code == 405:
        return error_response('Method not allowed. Use POST.', 405)
    return error_response(e.name, e.code or 500)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    logger.exception("Unhandled error")
    return error_response('Internal server error.', 500)


if __name__ == '__main__':
    print("=" * 50)
    print("Starting metadata extraction server...")
    print(f"API available at: http://{Config.HOST}:{Config.PORT}/api/extract-metadata")
    print(f"Health check: http://{Config.HOST}:{Config.PORT}/health")
    print("=" * 50)
    app.run(debug=Config.DEBUG, host=Config.HOST, port=Config.PORT)
