# openocd_commands.py

class OpenOcdCommand:
    def render(self) -> str:
        raise NotImplementedError()

class SourceBoardCommand(OpenOcdCommand):
    def __init__(self, board_config): self.board_config = board_config
    def render(self): return f"source [find {self.board_config}]"

class InitCommand(OpenOcdCommand):
    def render(self): return "init"

class ResetHaltCommand(OpenOcdCommand):
    def render(self): return "reset halt"

class WriteImageCommand(OpenOcdCommand):
    def __init__(self, image_path): self.image_path = image_path
    def render(self): return f"flash write_image erase {self.image_path}"

class VerifyImageCommand(OpenOcdCommand):
    def __init__(self, image_path): self.image_path = image_path
    def render(self): return f"verify_image {self.image_path}"

class ResetCommand(OpenOcdCommand):
    def render(self): return "reset"

class ShutdownCommand(OpenOcdCommand):
    def render(self): return "shutdown"
