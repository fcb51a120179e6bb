from groundgate.render.gate import REQUIRED_PARAMS, AnswerabilityGate
from groundgate.render.refusal import format_missing_data_item, render_refusal

__all__ = ["REQUIRED_PARAMS", "AnswerabilityGate", "format_missing_data_item", "render_refusal"]
