# 디버깅을 위한 위치출력 처리
class PrintHandler:
    '''Location printer.
    This can print the message with instance's name.

    Set `verbose` to `False` to mute everything except warnings.'''

    verbose = True

    def prtwl(self, *text):
        '''Print-With-Location'''
        if self.verbose or (text and text[0] == "Warning!"):
            print(f"[{self.__class__.__name__}] ", *text)
