"""表单处理器集合.

说明:
- 这些 handler 作为表单视图的依赖,负责:
  - 构建表单树(委托布局插件的配置子表单)
  - 校验与提交表单值
  - 把提交结果写入布局暂存区
- handler 不做 commit,持久化由布局暂存区之外的保存流程负责
"""
