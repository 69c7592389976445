"""
Test suite for products and interest modules

Tests the Savings and Current withdrawal constraints, simple interest and
variant construction from configuration.
"""

import pytest
from decimal import Decimal

from bank_ledger.config import BankLedgerConfig
from bank_ledger.currency import Currency
from bank_ledger.interest import calculate_simple_interest
from bank_ledger.products import (
    CurrentVariant, ProductType, SavingsVariant, create_variant
)


class TestProductType:
    """Test product type resolution"""
    
    @pytest.mark.parametrize("choice,expected", [
        ("1", ProductType.SAVINGS),
        ("2", ProductType.CURRENT),
        (" Savings ", ProductType.SAVINGS),
        ("current", ProductType.CURRENT),
        (ProductType.CURRENT, ProductType.CURRENT),
    ])
    def test_from_choice(self, choice, expected):
        assert ProductType.from_choice(choice) is expected
    
    @pytest.mark.parametrize("choice", ["3", "", "checking"])
    def test_unknown_choice(self, choice):
        with pytest.raises(ValueError, match="Unknown account type"):
            ProductType.from_choice(choice)
    
    def test_display_name(self):
        assert ProductType.SAVINGS.display_name == "Savings"
        assert ProductType.CURRENT.display_name == "Current"


class TestSavingsVariant:
    """Test the minimum balance floor and interest"""
    
    def test_floor_boundary(self):
        variant = SavingsVariant()
        
        assert variant.withdrawal_allowed(Decimal('1000'), Decimal('500'))
        assert not variant.withdrawal_allowed(Decimal('1000'), Decimal('500.01'))
        assert not variant.withdrawal_allowed(Decimal('0'), Decimal('1'))
    
    def test_denial_message(self):
        assert SavingsVariant().denial_message() == (
            "Withdrawal denied. Savings account must maintain minimum balance of ₹500.00"
        )
    
    def test_interest(self):
        variant = SavingsVariant()
        
        assert variant.supports_interest
        assert variant.calculate_interest(Decimal('1000'), 2) == Decimal('80')
        assert variant.calculate_interest(Decimal('1000'), 0) == Decimal('0')
    
    def test_custom_values(self):
        variant = SavingsVariant(minimum_balance="100", interest_rate="5", currency=Currency.USD)
        
        assert variant.withdrawal_allowed(Decimal('150'), Decimal('50'))
        assert variant.calculate_interest(Decimal('200'), 1) == Decimal('10')
        assert "$100.00" in variant.denial_message()


class TestCurrentVariant:
    """Test the overdraft limit"""
    
    def test_overdraft_boundary(self):
        variant = CurrentVariant()
        
        assert variant.withdrawal_allowed(Decimal('0'), Decimal('5000'))
        assert not variant.withdrawal_allowed(Decimal('0'), Decimal('5000.01'))
        assert variant.withdrawal_allowed(Decimal('-4000'), Decimal('1000'))
    
    def test_denial_message(self):
        assert CurrentVariant().denial_message() == (
            "Withdrawal denied. Exceeds overdraft limit of ₹5000.00"
        )
    
    def test_no_interest(self):
        variant = CurrentVariant()
        
        assert not variant.supports_interest
        assert variant.calculate_interest(Decimal('1000'), 2) == Decimal('0')
        assert variant.calculate_interest(Decimal('-3000'), 5) == Decimal('0')


class TestCreateVariant:
    """Test building variants from configuration"""
    
    def test_defaults(self):
        config = BankLedgerConfig()
        
        savings = create_variant(ProductType.SAVINGS, config)
        current = create_variant("2", config)
        
        assert isinstance(savings, SavingsVariant)
        assert savings.minimum_balance == Decimal('500.00')
        assert savings.interest_rate == Decimal('4.0')
        assert isinstance(current, CurrentVariant)
        assert current.overdraft_limit == Decimal('5000.00')
    
    def test_configured_rules(self):
        config = BankLedgerConfig(
            savings_minimum_balance="1000",
            savings_interest_rate="6.5",
            current_overdraft_limit="250"
        )
        
        savings = create_variant("savings", config)
        current = create_variant("current", config)
        
        assert savings.minimum_balance == Decimal('1000')
        assert savings.interest_rate == Decimal('6.5')
        assert current.overdraft_limit == Decimal('250')


class TestSimpleInterest:
    """Test the simple interest formula"""
    
    def test_reference_case(self):
        assert calculate_simple_interest(Decimal('1000'), Decimal('4.0'), 2) == Decimal('80.0')
    
    def test_non_positive_years(self):
        assert calculate_simple_interest(Decimal('1000'), Decimal('4.0'), 0) == Decimal('0')
        assert calculate_simple_interest(Decimal('1000'), Decimal('4.0'), -3) == Decimal('0')
    
    def test_mixed_inputs(self):
        assert calculate_simple_interest(1500, 4.0, 3) == Decimal('180')
