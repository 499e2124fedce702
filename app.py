# app.py
import logging
import os
import uuid
from datetime import datetime, timezone

from flask import Flask, jsonify, request, send_file, url_for

from pdf_generator.reportlab_pdf import generate_pdf
from sqlreview.catalog import InMemoryCatalog
from sqlreview.engine import DEFAULT_CHECKS_PATH, RuleEngine
from sqlreview.errors import ReviewError
from sqlreview.logging_config import configure_logging
from sqlreview.parser import DEFAULT_DIALECT
from sqlreview.reviewer import review_sql_text

OUTPUT_FOLDER = "output"
ALLOWED_EXT = {'.sql', '.txt'}

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.update(
    OUTPUT_FOLDER=OUTPUT_FOLDER,
    CHECKS_PATH=os.environ.get("SQLREVIEW_CHECKS", DEFAULT_CHECKS_PATH),
    CATALOG_PATH=os.environ.get("SQLREVIEW_CATALOG"),
)


def allowed_file(filename):
    ext = os.path.splitext(filename)[1].lower()
    return ext in ALLOWED_EXT


def _read_request():
    """(sql text, dialect, error response) from an upload or a JSON body."""
    if 'sqlFile' in request.files:
        file = request.files['sqlFile']
        if file.filename == '':
            return None, None, (jsonify({"error": "No selected file"}), 400)
        if not allowed_file(file.filename):
            return None, None, (jsonify({"error": "Only .sql or .txt files allowed"}), 400)
        content = file.read().decode('utf-8', errors='ignore')
        return content, request.form.get('dialect', DEFAULT_DIALECT), None

    body = request.get_json(silent=True)
    if isinstance(body, dict) and isinstance(body.get("sql"), str):
        return body["sql"], body.get("dialect") or DEFAULT_DIALECT, None
    return None, None, (jsonify({"error": "Send a 'sqlFile' upload or a JSON body with 'sql'"}), 400)


@app.route('/review', methods=['POST'])
def review_route():
    content, dialect, failure = _read_request()
    if failure is not None:
        return failure

    try:
        engine = RuleEngine(checks_config_path=app.config["CHECKS_PATH"])
        catalog_path = app.config.get("CATALOG_PATH")
        catalog = InMemoryCatalog.from_file(catalog_path) if catalog_path else None
    except (OSError, ValueError, ReviewError) as e:
        logger.error("cannot load review configuration: %s", e)
        return jsonify({"error": f"Configuration error: {e}"}), 500

    result = review_sql_text(content, catalog=catalog, dialect=dialect, engine=engine)

    # <YYYYMMDD>_<HHMMSS>_<id>.pdf
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_filename = f"review_{timestamp}_{uuid.uuid4().hex[:8]}.pdf"
    output_folder = app.config["OUTPUT_FOLDER"]
    os.makedirs(output_folder, exist_ok=True)
    out_path = os.path.join(output_folder, out_filename)

    run_meta = {
        "dialect": dialect,
        "source": request.files['sqlFile'].filename if 'sqlFile' in request.files else "request body",
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }
    generate_pdf(run_meta, result, out_path)

    payload = result.to_dict()
    payload["pdf_url"] = url_for('download_file', filename=out_filename)
    return jsonify(payload)


@app.route('/download/<filename>', methods=['GET'])
def download_file(filename):
    path = os.path.join(app.config["OUTPUT_FOLDER"], os.path.basename(filename))
    if not os.path.exists(path):
        return "Not found", 404
    return send_file(os.path.abspath(path), as_attachment=True)


if __name__ == '__main__':
    configure_logging(level="INFO")
    app.run(debug=True, host='0.0.0.0', port=5000)
