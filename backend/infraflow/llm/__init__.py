"""
LLM modification path - turns a free-form request into diff operations.
"""

from infraflow.llm.client import LLMClient
from infraflow.llm.modifier import LLMModifier, ModifyResult
from infraflow.llm.prompt import SYSTEM_PROMPT, build_user_message, summarize_spec
from infraflow.llm.response import ModifyError, ModifyErrorCode
