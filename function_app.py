"""Ainsemble contact form and newsletter email service"""
import azure.functions as func
from src.ainsemble_mail.blueprints.bp_email_api import bp as email_api_bp

app = func.FunctionApp()

# Register the blueprints
app.register_blueprint(email_api_bp)  # Contact form, subscription and health HTTP API
