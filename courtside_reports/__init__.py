from .pdf_report import generate_player_report_pdf

__all__ = ["generate_player_report_pdf"]
