#!/usr/bin/env python3
"""
HTTP Server for Lift Status
Read-only JSON API over a running lift and its event recorder
"""
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS


def create_app(lift, statistics=None):
    """
    Build the Flask app serving one lift.

    Args:
        lift: Lift whose status is served
        statistics: Optional Statistics recorder whose event log is served

    Returns:
        Flask application
    """
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    @app.route('/api/status')
    def status():
        """Current lift status snapshot"""
        snapshot = lift.get_status().to_dict()
        snapshot['busy'] = lift.is_busy()
        return jsonify(snapshot)

    @app.route('/api/events')
    def events():
        """
        Recorded events from a given index (for live polling)
        Query params:
            - from: starting event index (default: 0)
        """
        if statistics is None:
            return jsonify({'error': 'No event recorder attached', 'events': []}), 404

        try:
            from_index = int(request.args.get('from', 0))
        except ValueError:
            return jsonify({'error': "'from' must be an integer", 'events': []}), 400
        from_index = max(from_index, 0)

        log = list(statistics.event_log)
        selected = log[from_index:]
        return jsonify({
            'events': selected,
            'total_events': len(log),
            'from': from_index,
            'returned_count': len(selected)
        })

    @app.route('/api/health')
    def health():
        """Server status endpoint"""
        return jsonify({
            'status': 'ok',
            'server': 'Lift Status HTTP Server',
            'lift': lift.name,
            'version': '1.0'
        })

    return app


def start_server_thread(app, host='localhost', port=5000):
    """Run the Flask server in a daemon thread next to the command shell"""
    thread = threading.Thread(
        target=app.run,
        kwargs={'host': host, 'port': port, 'threaded': True, 'use_reloader': False},
        daemon=True,
    )
    thread.start()
    return thread
