"""증명 백엔드 오류."""


class BackendError(ValueError):
    """회로를 PLONK 백엔드로 표현할 수 없거나 키와 회로가 맞지 않을 때."""


class ProofError(ValueError):
    """witness 가 제약을 만족하지 않아 증명을 만들 수 없을 때."""
