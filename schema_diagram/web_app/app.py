# -*- coding: utf-8 -*-
"""
Schema Diagram Web Application - Flask Backend
"""
import io
import logging

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS

from ..engine import (
    Bounds, Schema, default_positions, export_diagram, import_diagram,
    parse_json_schema, parse_sql, route_relationships,
)
from ..engine.connectors import ROUTE_MODES
from .app_config import config

app = Flask(__name__)
CORS(app)
app.secret_key = config.SECRET_KEY  # 从环境变量加载
app.config['MAX_CONTENT_LENGTH'] = config.MAX_CONTENT_LENGTH
app.logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))

ROUTING_CONFIG = config.get_routing_config()


def _parse_response(schema, error_message):
    """解析结果转换为前端需要的格式"""
    if error_message:
        # 提供更友好的错误信息
        user_friendly_msg = error_message
        if error_message.startswith("No CREATE TABLE"):
            user_friendly_msg = "未找到有效的 CREATE TABLE 语句。请确保 SQL 中包含表定义。"
        elif error_message.startswith("JSON parse error"):
            user_friendly_msg = "JSON 格式错误，请检查括号和逗号是否正确。"
        return jsonify({
            'error': user_friendly_msg,
            'details': error_message
        }), 400

    return jsonify({
        'schema': schema.to_dict(),
        'positions': default_positions(schema.tables),
    })


def _schema_from_payload(data):
    """从请求体中读取 schema，格式不对时返回 None"""
    schema_data = data.get('schema') if isinstance(data, dict) else None
    if not isinstance(schema_data, dict):
        return None
    try:
        return Schema.from_dict(schema_data)
    except (KeyError, TypeError, AttributeError):
        return None


@app.route('/api/health')
def api_health():
    return jsonify({'status': 'ok'})


@app.route('/api/parse_sql', methods=['POST'])
def api_parse_sql():
    """解析SQL并生成图表数据"""
    try:
        data = request.get_json(silent=True) or {}
        sql = data.get('sql', '')

        schema, error_message = parse_sql(sql)
        if not error_message:
            app.logger.info(f"Parsed {len(schema.tables)} table(s), "
                            f"{len(schema.relationships)} relationship(s) from SQL")
        return _parse_response(schema, error_message)

    except Exception as e:
        app.logger.error(f"An unexpected error occurred in api_parse_sql: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/parse_json', methods=['POST'])
def api_parse_json():
    """解析JSON表结构"""
    try:
        data = request.get_json(silent=True) or {}
        text = data.get('json', '')

        schema, error_message = parse_json_schema(text)
        return _parse_response(schema, error_message)

    except Exception as e:
        app.logger.error(f"An unexpected error occurred in api_parse_json: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/routes', methods=['POST'])
def api_routes():
    """计算关系连线路径"""
    try:
        data = request.get_json(silent=True) or {}
        schema = _schema_from_payload(data)
        if schema is None:
            return jsonify({'error': '缺少有效的 schema'}), 400

        positions = data.get('positions') or default_positions(schema.tables)
        mode = data.get('mode', ROUTING_CONFIG['mode'])
        if mode not in ROUTE_MODES:
            return jsonify({'error': f'不支持的布线模式: {mode}'}), 400

        bounds = Bounds(ROUTING_CONFIG['canvas_width'], ROUTING_CONFIG['canvas_height'])
        routes = route_relationships(schema, positions, mode, bounds, ROUTING_CONFIG['cell_size'])
        return jsonify({'routes': routes})

    except Exception as e:
        app.logger.error(f"An unexpected error occurred in api_routes: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/export', methods=['POST'])
def api_export():
    """导出图表文件"""
    try:
        data = request.get_json(silent=True) or {}
        schema = _schema_from_payload(data)
        if schema is None:
            return jsonify({'error': '缺少有效的 schema'}), 400

        view_state = data.get('viewState') or {}
        document = export_diagram(
            schema,
            data.get('positions') or {},
            zoom=view_state.get('zoom', 1.0),
            pan=view_state.get('pan'),
        )

        file_stream = io.BytesIO(document.encode('utf-8'))
        return send_file(
            file_stream,
            mimetype='application/json',
            as_attachment=True,
            download_name='schema-diagram.json'
        )

    except Exception as e:
        app.logger.error(f"An unexpected error occurred in api_export: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/import', methods=['POST'])
def api_import():
    """导入图表文件"""
    try:
        data = request.get_json(silent=True) or {}
        document, error_message = import_diagram(data.get('document', ''))
        if error_message:
            return jsonify({'error': error_message}), 400

        return jsonify({
            'schema': document.schema.to_dict(),
            'positions': document.positions,
            'viewState': {'zoom': document.zoom, 'pan': document.pan},
        })

    except Exception as e:
        app.logger.error(f"An unexpected error occurred in api_import: {e}")
        return jsonify({'error': str(e)}), 500


if __name__ == '__main__':
    app.run(debug=False, host='localhost', port=5000, use_reloader=False)
