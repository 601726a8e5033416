RET_CODE_OK = 0
