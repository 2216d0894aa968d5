"""
Project Dispatch Desk
Blueprint registry.
"""


def register_blueprints(app):
    from dispatchdesk.blueprints.ai_bp import ai_bp
    from dispatchdesk.blueprints.auth_bp import auth_bp
    from dispatchdesk.blueprints.dashboard_bp import dashboard_bp
    from dispatchdesk.blueprints.health_bp import health_bp
    from dispatchdesk.blueprints.project_bp import project_bp
    from dispatchdesk.blueprints.prompt_bp import prompt_bp
    from dispatchdesk.blueprints.report_bp import report_bp
    from dispatchdesk.blueprints.user_bp import user_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(project_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(report_bp)
    app.register_blueprint(prompt_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(ai_bp)
    app.register_blueprint(health_bp)
