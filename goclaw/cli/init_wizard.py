"""Interactive questionnaire that writes IDENTITY.md and SOUL.md."""

import sys
from pathlib import Path
from typing import TextIO

from ..prompts.template_renderer import render_template
from .console import Console

STYLES = {"1": "简洁", "2": "详细", "3": "幽默"}
DEFAULT_STYLE = "1"
DEFAULT_TECH_LEVEL = "中"


class InitWizard:
    """Collects the user's profile and writes the workspace identity files.

    Args:
        workspace_dir: Directory IDENTITY.md and SOUL.md are written to
        console: Output for prompts and messages
        input_stream: Where answers are read from (default: sys.stdin)
    """

    def __init__(
        self,
        workspace_dir: Path,
        console: Console | None = None,
        input_stream: TextIO | None = None,
    ):
        self.workspace_dir = Path(workspace_dir)
        self.console = console or Console()
        self.input_stream = input_stream or sys.stdin

    def ask(self, text: str) -> str:
        self.console.green(text, end="")
        return self.input_stream.readline().strip()

    def collect(self) -> dict[str, str]:
        """Ask every question and return the answers keyed by template variable."""
        answers: dict[str, str] = {}

        self.console.yellow("## 基本信息\n")
        answers["name"] = self.ask("你的名字: ")
        answers["occupation"] = self.ask("你的职业: ")
        answers["location"] = self.ask("你所在的城市/地区: ")
        answers["timezone"] = self.ask("你的时区 (例如: Asia/Shanghai): ")

        self.console.yellow("\n## 兴趣与专长\n")
        answers["interests"] = self.ask("兴趣爱好 (用逗号分隔): ")
        answers["expertise"] = self.ask("专长技能 (用逗号分隔): ")

        self.console.yellow("\n## 沟通偏好\n")
        self.console.white("回复风格选项:")
        self.console.white("  1. 简洁 - 直接回答，避免冗余")
        self.console.white("  2. 详细 - 提供完整的解释和背景")
        self.console.white("  3. 幽默 - 轻松诙谐的表达方式")
        style = self.ask("选择回复风格 (1-3, 默认1): ") or DEFAULT_STYLE
        answers["style"] = STYLES.get(style, STYLES[DEFAULT_STYLE])
        answers["tech_level"] = self.ask("技术深度偏好 (高/中/低, 默认: 中): ") or DEFAULT_TECH_LEVEL

        self.console.yellow("\n## 工作习惯\n")
        answers["work_hours"] = self.ask("工作时间 (例如: 9:00-18:00): ")
        answers["tools"] = self.ask("常用工具 (用逗号分隔): ")

        self.console.yellow("\n## 个性特征 (可选)")
        answers["personality"] = self.ask("个性特点描述 (可选，按回车跳过): ")
        return answers

    def write_files(self, answers: dict[str, str]) -> tuple[Path, Path]:
        """Write IDENTITY.md and append any custom personality to SOUL.md."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)

        identity_path = self.workspace_dir / "IDENTITY.md"
        identity_path.write_text(render_template("identity.md.j2", **answers), encoding="utf-8")

        soul_path = self.workspace_dir / "SOUL.md"
        if answers.get("personality"):
            with soul_path.open("a", encoding="utf-8") as f:
                f.write(f"\n## 用户自定义个性\n\n{answers['personality']}\n")

        return identity_path, soul_path

    def run(self) -> int:
        self.console.cyan("╔════════════════════════════════════════╗")
        self.console.cyan("║     GoClaw 身份配置向导                ║")
        self.console.cyan("╚════════════════════════════════════════╝")
        self.console.white("\n这将帮助创建个性化的身份配置文件。\n")

        answers = self.collect()

        self.console.yellow("\n════════════════════════════════════════")
        self.console.white("配置预览:")
        for key, value in answers.items():
            if value:
                self.console.white(f"  {key}: {value}")
        self.console.yellow("\n════════════════════════════════════════")

        if self.ask("\n确认生成配置文件？(y/n): ").lower() != "y":
            self.console.yellow("已取消。")
            return 0

        identity_path, soul_path = self.write_files(answers)

        self.console.green("\n✓ 配置文件已生成！")
        self.console.white("\n文件位置:")
        self.console.white(f"  - {identity_path}")
        self.console.white(f"  - {soul_path}")
        self.console.white("\n你可以随时手动编辑这些文件来调整我的个性。")
        self.console.white("\n现在可以开始对话了：")
        self.console.cyan("  goclaw chat\n")
        return 0
