"""
API Module
FastAPI App-Factory, Response-Modelle und Dependencies
"""
