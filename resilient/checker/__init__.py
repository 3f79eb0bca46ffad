from resilient.checker.type_checker import TypeChecker, check_program

__all__ = ["TypeChecker", "check_program"]
