# trans_relay/engines/__init__.py
"""原生翻译能力适配器与后备模型适配器。"""
