"""
Report rendering and export: HTML, PDF, share text
"""
