from boardflash.openocd_commands import SourceBoardCommand, WriteImageCommand, VerifyImageCommand

def test_source_wraps_config_in_find():
    c = SourceBoardCommand("board/stm32f412g-disco.cfg")
    assert c.render() == "source [find board/stm32f412g-disco.cfg]"

def test_write_image_erases_first():
    assert WriteImageCommand("/b/app.elf").render() == "flash write_image erase /b/app.elf"

def test_verify_image_uses_same_path():
    assert VerifyImageCommand("/b/app.elf").render() == "verify_image /b/app.elf"
