"""领域层模型与异常。

包含：
- models: Conversation / Member / Page 以及列表过滤参数等数据结构。
- exceptions: 业务异常类型定义。
"""
