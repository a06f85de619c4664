"""Flask application component and JSON error recovery for request handlers."""