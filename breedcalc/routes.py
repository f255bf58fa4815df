from flask import Blueprint, request, jsonify, current_app, send_file
import pandas as pd
import logging
from io import BytesIO
from breedcalc.pedigree.session import CalculationOptions, calculate_breeding_inbreeding, rank_results
from breedcalc.pedigree.validation.validator import PedigreeError, normalize_identifier, record_identifier, records_from_frame

# Blueprints
main_blueprint = Blueprint('main', __name__)

# General app configuration
logging.basicConfig(level=logging.INFO)

REQUEST_OPTIONS = ('path_mode', 'attach_policy', 'unit')

EXPORT_COLUMNS = {
    'subjectId': 'Subject ID',
    'partnerId': 'Partner ID',
    'coefficient': 'Expected Offspring F',
    'mode': 'Path Mode',
    'cycleDetected': 'Cycle Detected',
}


def _calculation_options(overrides=None):
    """App config defaults, with per-request path mode, attach policy and unit."""
    settings = {
        'path_mode': current_app.config.get('BREEDCALC_PATH_MODE'),
        'memo_scope': current_app.config.get('BREEDCALC_MEMO_SCOPE'),
        'attach_policy': current_app.config.get('BREEDCALC_ATTACH_POLICY'),
        'unit': current_app.config.get('BREEDCALC_UNIT'),
    }
    for name in REQUEST_OPTIONS:
        if overrides and overrides.get(name):
            settings[name] = overrides[name]
    return CalculationOptions.from_mapping(settings)


def _calculate_from_json():
    """Returns (results, None) or (None, error_response)."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, (jsonify({"error": "The request body must be a JSON object."}), 400)

    overrides = data.get('options') or {}
    if not isinstance(overrides, dict):
        return None, (jsonify({"error": "'options' must be an object."}), 400)
    try:
        options = _calculation_options(overrides)
    except ValueError as e:
        return None, (jsonify({"error": str(e)}), 400)

    try:
        results = calculate_breeding_inbreeding(data.get('subject'), data.get('partners'), options)
    except Exception as e:
        current_app.logger.error(f"Calculation error: {e}", exc_info=True)
        return None, (jsonify({"error": "Server error during the calculation."}), 500)

    if data.get('rank'):
        results = rank_results(results)
    return results, None

# --- Main Blueprint Routes (Core App) ---

@main_blueprint.route('/', methods=['GET'])
def index():
    return jsonify({"message": "Welcome to breedcalc!"})

@main_blueprint.route('/api/inbreeding', methods=['POST'])
def inbreeding():
    results, error = _calculate_from_json()
    if error:
        return error
    return jsonify({"results": results})

@main_blueprint.route('/api/inbreeding/upload', methods=['POST'])
def upload_and_calculate():
    if 'pedigree_file' not in request.files or not request.files['pedigree_file'].filename:
        return jsonify({"error": "No file selected."}), 400

    subject_id = normalize_identifier(request.form.get('subject_id'))
    if subject_id is None:
        return jsonify({"error": "Missing 'subject_id'."}), 400

    try:
        options = _calculation_options(request.form)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    file = request.files['pedigree_file']
    try:
        records = records_from_frame(pd.read_csv(file, dtype=str))
    except PedigreeError as e:
        return jsonify({"error": str(e)}), 400
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        current_app.logger.error(f"File processing error: {e}", exc_info=True)
        return jsonify({"error": f"Could not read the uploaded file: {e}"}), 400

    subject = next((r for r in records if record_identifier(r) == subject_id), None)
    if subject is None:
        return jsonify({"error": f"Subject '{subject_id}' is not in the uploaded file."}), 400
    partners = [r for r in records if r is not subject]

    try:
        results = calculate_breeding_inbreeding(subject, partners, options)
    except Exception as e:
        current_app.logger.error(f"Calculation error: {e}", exc_info=True)
        return jsonify({"error": "Server error during the calculation."}), 500

    if request.form.get('rank', '').lower() in ('1', 'true', 'yes'):
        results = rank_results(results)
    return jsonify({"results": results})

@main_blueprint.route('/api/inbreeding/export', methods=['POST'])
def export_results():
    results, error = _calculate_from_json()
    if error:
        return error

    try:
        output_df = pd.DataFrame(results, columns=list(EXPORT_COLUMNS)).rename(columns=EXPORT_COLUMNS)

        output = BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            output_df.to_excel(writer, index=False, sheet_name='Mating Results')
        output.seek(0)

        return send_file(
            output,
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
            as_attachment=True,
            download_name='mating_results.xlsx'
        )

    except Exception as e:
        current_app.logger.error(f"Error exporting results: {e}", exc_info=True)
        return jsonify({"error": "Error during export."}), 500
